import os
import sys

# Add the current directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Settings are read at import time: point the app at an in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import roster.db.base  # noqa: F401
from roster.db.base_class import Base
from roster.db.session import register_sqlite_functions
from roster.db.student_store import StudentStore
from roster.models.student import Student
from roster.services.student_query import StudentQueryService


# Create an in-memory SQLite database for testing
@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def TestingSessionLocal(engine):
    """Create a session factory for the test database."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


# Override the database dependency to use our test database
@pytest.fixture
def override_get_db(TestingSessionLocal):
    """Override the database dependency to use our test database."""
    def _override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()
    return _override_get_db


@pytest.fixture
def db_session(TestingSessionLocal):
    """Create a database session for each test."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return StudentStore(db_session)


@pytest.fixture
def service(store):
    return StudentQueryService(store, default_limit=10, max_limit=100)


@pytest.fixture
def client(override_get_db):
    """Create a test client for API tests."""
    from fastapi.testclient import TestClient
    from roster.main import app
    from roster.db import get_db

    # Override the database dependency
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def make_students(db_session):
    """Insert ``n`` numbered students in order; returns the ORM rows."""
    def _make(n: int, prefix: str = "S"):
        rows = []
        for i in range(1, n + 1):
            st = Student(
                student_id=f"{prefix}{i:03d}",
                firstname=f"First{i:03d}",
                lastname=f"Last{i:03d}",
                nickname="",
            )
            db_session.add(st)
            db_session.commit()
            db_session.refresh(st)
            rows.append(st)
        return rows
    return _make


@pytest.fixture
def anne(db_session):
    st = Student(student_id="6501001", firstname="Anne", lastname="Shirley", nickname="Carrots")
    db_session.add(st)
    db_session.commit()
    db_session.refresh(st)
    return st


@pytest.fixture
def anyio_backend():
    return "asyncio"
