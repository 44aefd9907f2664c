from roster.db.session import SessionLocal, engine, get_db

__all__ = ["engine", "SessionLocal", "get_db"]
