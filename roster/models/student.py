from __future__ import annotations

import datetime as dt

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from roster.db.base_class import Base

STUDENT_FIELDS = ("student_id", "firstname", "lastname", "nickname")


class Student(Base):
    __tablename__ = "students"
    # AUTOINCREMENT: ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    firstname: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    lastname: Mapped[str] = mapped_column(
        String(120), index=True, nullable=False, default=""
    )
    nickname: Mapped[str] = mapped_column(
        String(120), index=True, nullable=False, default=""
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Student id={self.id} student_id={self.student_id!r}>"
