from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from roster.core.settings import settings
from roster.db import get_db
from roster.db.student_store import StudentStore
from roster.services.student_query import StudentQueryService


def get_student_store(db: Session = Depends(get_db)) -> StudentStore:  # noqa: B008
    return StudentStore(db, collation=settings.SEARCH_COLLATION)


def get_student_service(
    store: StudentStore = Depends(get_student_store),  # noqa: B008
) -> StudentQueryService:
    return StudentQueryService(store)
