from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from roster.core.logging import get_logger
from roster.core.settings import settings


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def register_sqlite_functions(engine: Engine) -> None:
    """SQLite's lower() is ASCII-only; expose Python's Unicode casefold."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _record):
        dbapi_conn.create_function("casefold", 1, _casefold, deterministic=True)


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
register_sqlite_functions(engine)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """Dependency do FastAPI: abre uma sessão por request e fecha no final."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None, *, create_schema: bool = True) -> None:
    """Ping the database once at startup and optionally create missing tables."""
    import roster.db.base  # noqa: F401
    from roster.db.base_class import Base

    bind = bind or engine
    log = get_logger().bind(dialect=bind.dialect.name)
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))
    log.info("db.connected")

    if create_schema:
        Base.metadata.create_all(bind=bind)
        log.info("db.schema_ready")
