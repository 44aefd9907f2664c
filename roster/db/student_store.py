from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, String, delete, func, literal, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Session
from sqlalchemy.sql.functions import FunctionElement

from roster.core.errors import ConflictError
from roster.models.student import STUDENT_FIELDS, Student

LIKE_ESCAPE = "\\"


class casefold(FunctionElement):
    """Unicode-aware lowercasing, rendered per dialect."""

    name = "casefold"
    type = String()
    inherit_cache = True


@compiles(casefold)
def _casefold_default(element, compiler, **kw):
    return "lower(%s)" % compiler.process(element.clauses, **kw)


@compiles(casefold, "sqlite")
def _casefold_sqlite(element, compiler, **kw):
    # function registered on connect by roster.db.session
    return "casefold(%s)" % compiler.process(element.clauses, **kw)


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class StudentStore:
    """Record-store handle for students.

    Every method is one atomic statement against the database; nothing here
    spans more than one record. Callers build filters with ``contains_ci`` and
    hand them back to ``find``/``count``.
    """

    def __init__(self, db: Session, *, collation: str | None = None) -> None:
        self.db = db
        self.collation = collation

    @property
    def dialect(self) -> str:
        return self.db.get_bind().dialect.name

    def _folded(self, column) -> ColumnElement:
        if self.collation and self.dialect == "postgresql":
            column = column.collate(self.collation)
        return casefold(column)

    def contains_ci(self, text: str) -> ColumnElement[bool]:
        """Match records where any name field contains ``text``, ignoring case."""
        pattern = casefold(literal(f"%{escape_like(text)}%", String))
        return or_(
            *(
                self._folded(getattr(Student, field)).like(pattern, escape=LIKE_ESCAPE)
                for field in STUDENT_FIELDS
            )
        )

    def find(
        self,
        where: ColumnElement[bool] | None = None,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Student]:
        stmt = select(Student)
        if where is not None:
            stmt = stmt.where(where)
        stmt = stmt.order_by(Student.id.asc()).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt))

    def count(self, where: ColumnElement[bool] | None = None) -> int:
        stmt = select(func.count(Student.id))
        if where is not None:
            stmt = stmt.where(where)
        return self.db.scalar(stmt) or 0

    def find_one_by_id(self, id_: int) -> Student | None:
        return self.db.get(Student, id_)

    def find_one_by_student_id(
        self, student_id: str, *, exclude_id: int | None = None
    ) -> Student | None:
        stmt = select(Student).where(Student.student_id == student_id)
        if exclude_id is not None:
            stmt = stmt.where(Student.id != exclude_id)
        return self.db.scalars(stmt.limit(1)).first()

    def insert_one(self, fields: Mapping[str, Any]) -> Student:
        st = Student(**fields)
        self.db.add(st)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError() from exc
        self.db.refresh(st)
        return st

    def update_one(self, id_: int, fields: Mapping[str, Any]) -> Student | None:
        """Replace ``fields`` on one record. Returns None when nothing matched."""
        try:
            result = self.db.execute(
                update(Student)
                .where(Student.id == id_)
                .values(**fields)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError() from exc
        if result.rowcount == 0:
            return None
        st = self.db.get(Student, id_, populate_existing=True)
        return st

    def delete_one(self, id_: int) -> bool:
        result = self.db.execute(
            delete(Student)
            .where(Student.id == id_)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount > 0
