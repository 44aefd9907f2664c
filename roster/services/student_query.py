from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pydantic

from roster.core.errors import ConflictError, NotFoundError, ValidationError
from roster.core.logging import get_logger
from roster.core.settings import settings
from roster.db.student_store import StudentStore
from roster.models.student import Student
from roster.schemas.students import (
    PaginationOut,
    StudentIn,
    StudentOut,
    StudentPageOut,
)

log = get_logger(__name__)


# largest value a SQL BIGINT / SQLite INTEGER can hold
MAX_SQL_INT = 2**63 - 1


def _digits(raw: Any) -> int | None:
    """Plain ASCII digits only: no sign, underscores or other numerals."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def out_of_range(self) -> bool:
        """No row can sit this far in: skip/limit would overflow the database."""
        return self.skip > MAX_SQL_INT


def _positive_int(raw: Any) -> int | None:
    if raw is None:
        return None
    value = _digits(raw.strip() if isinstance(raw, str) else raw)
    return value if value is not None and value >= 1 else None


def parse_page_request(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int = 10,
    max_limit: int | None = None,
) -> PageRequest:
    """Absent, non-numeric or < 1 values fall back to page 1 / default_limit."""
    p = _positive_int(page) or 1
    lim = _positive_int(limit) or default_limit
    if max_limit is not None:
        lim = min(lim, max_limit)
    return PageRequest(page=p, limit=min(lim, MAX_SQL_INT))


def total_pages(total: int, limit: int) -> int:
    return -(-total // limit) if total > 0 else 0


def parse_student_id(raw: Any) -> int:
    """Ids are opaque to clients; anything that can't name a row is not found."""
    value = _digits(raw)
    if value is None or not 1 <= value <= MAX_SQL_INT:
        raise NotFoundError()
    return value


def validate_student(payload: StudentIn | Mapping[str, Any]) -> StudentIn:
    if isinstance(payload, StudentIn):
        return payload
    try:
        return StudentIn.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(describe_validation_errors(exc.errors())) from exc


def describe_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        if err.get("type") == "missing":
            parts.append(f"{field} is required")
        elif field:
            parts.append(f"{field}: {err.get('msg')}")
        else:
            parts.append(str(err.get("msg")))
    return "; ".join(parts) or ValidationError.default_message


class StudentQueryService:
    """List/search/create/update/delete over an injected ``StudentStore``."""

    def __init__(
        self,
        store: StudentStore,
        *,
        default_limit: int = settings.DEFAULT_PAGE_LIMIT,
        max_limit: int | None = settings.MAX_PAGE_LIMIT,
    ) -> None:
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def _page_request(self, page: Any, limit: Any) -> PageRequest:
        return parse_page_request(
            page, limit, default_limit=self.default_limit, max_limit=self.max_limit
        )

    def _paginate(self, req: PageRequest, where=None) -> StudentPageOut:
        if req.out_of_range:
            rows = []
        else:
            rows = self.store.find(where, skip=req.skip, limit=req.limit)
        total = self.store.count(where)
        return StudentPageOut(
            students=[StudentOut.model_validate(s) for s in rows],
            pagination=PaginationOut(
                total=total,
                page=req.page,
                limit=req.limit,
                totalPages=total_pages(total, req.limit),
            ),
        )

    def list_students(self, page: Any = None, limit: Any = None) -> StudentPageOut:
        return self._paginate(self._page_request(page, limit))

    def search_students(
        self, text: str | None, page: Any = None, limit: Any = None
    ) -> StudentPageOut:
        req = self._page_request(page, limit)
        term = (text or "").strip()
        if not term:
            return self._paginate(req)
        result = self._paginate(req, self.store.contains_ci(term))
        log.info(
            "student.search",
            term=term,
            page=req.page,
            total=result.pagination.total,
        )
        return result

    def get_student(self, student_pk: Any) -> Student:
        st = self.store.find_one_by_id(parse_student_id(student_pk))
        if st is None:
            raise NotFoundError()
        return st

    def create_student(self, payload: StudentIn | Mapping[str, Any]) -> Student:
        data = validate_student(payload)
        if self.store.find_one_by_student_id(data.student_id) is not None:
            log.info("student.conflict", student_id=data.student_id)
            raise ConflictError()
        st = self.store.insert_one(data.model_dump())
        log.info("student.created", id=st.id, student_id=st.student_id)
        return st

    def update_student(
        self, student_pk: Any, payload: StudentIn | Mapping[str, Any]
    ) -> Student:
        data = validate_student(payload)
        pk = parse_student_id(student_pk)
        if self.store.find_one_by_student_id(data.student_id, exclude_id=pk):
            log.info("student.conflict", id=pk, student_id=data.student_id)
            raise ConflictError()
        st = self.store.update_one(pk, data.model_dump())
        if st is None:
            raise NotFoundError()
        log.info("student.updated", id=pk, student_id=st.student_id)
        return st

    def delete_student(self, student_pk: Any) -> None:
        pk = parse_student_id(student_pk)
        if not self.store.delete_one(pk):
            raise NotFoundError()
        log.info("student.deleted", id=pk)
