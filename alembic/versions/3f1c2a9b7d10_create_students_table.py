"""students: create table

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 10:12:41.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.String(length=64), nullable=False),
        sa.Column("firstname", sa.String(length=120), nullable=False),
        sa.Column("lastname", sa.String(length=120), nullable=False),
        sa.Column("nickname", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_students_student_id", "students", ["student_id"], unique=True
    )
    op.create_index("ix_students_firstname", "students", ["firstname"], unique=False)
    op.create_index("ix_students_lastname", "students", ["lastname"], unique=False)
    op.create_index("ix_students_nickname", "students", ["nickname"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_students_nickname", table_name="students")
    op.drop_index("ix_students_lastname", table_name="students")
    op.drop_index("ix_students_firstname", table_name="students")
    op.drop_index("ix_students_student_id", table_name="students")
    op.drop_table("students")
