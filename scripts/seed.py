# scripts/seed.py
from __future__ import annotations

import argparse

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from roster.core.errors import ConflictError
from roster.core.settings import settings
from roster.db import get_db
from roster.db.student_store import StudentStore
from roster.services.student_query import StudentQueryService

# ---------------- Dados de Exemplo ----------------
STUDENTS_DATA = [
    ("6501001", "Anne", "Shirley", "Carrots"),
    ("6501002", "Bruno", "Alves", ""),
    ("6501003", "Clara", "Dias", "Clarinha"),
    ("6501004", "Diego", "Nogueira", ""),
    ("6501005", "Eduarda", "Pires", "Duda"),
    ("6501006", "สมชาย", "ใจดี", "ชาย"),
    ("6501007", "สมหญิง", "รักเรียน", "หญิง"),
    ("6501008", "Joanne", "Ng", "Jo"),
    ("6501009", "Marianne", "Costa", ""),
    ("6501010", "Kittipong", "Saetang", "Kit"),
    ("6501011", "Lucas", "Ferreira", "Luke"),
    ("6501012", "Ánnika", "Østergaard", ""),
]


def get_session() -> Session:
    gen = get_db()
    session: Session = next(gen)
    return session


def check_tables_exist(db: Session) -> bool:
    return inspect(db.get_bind()).has_table("students")


def seed_students(service: StudentQueryService) -> tuple[int, int]:
    created = skipped = 0
    for student_id, firstname, lastname, nickname in STUDENTS_DATA:
        try:
            service.create_student(
                {
                    "student_id": student_id,
                    "firstname": firstname,
                    "lastname": lastname,
                    "nickname": nickname,
                }
            )
        except ConflictError:
            skipped += 1
            continue
        created += 1
    return created, skipped


def main():
    parser = argparse.ArgumentParser(description="Popula a tabela students (DEV/HML).")
    parser.parse_args()

    print("[Seed] Iniciando seed do banco de dados...")
    db = get_session()
    try:
        if not check_tables_exist(db):
            print("[Seed] Erro: a tabela 'students' ainda não existe.")
            print("  Execute as migrações primeiro: alembic upgrade head")
            return

        service = StudentQueryService(
            StudentStore(db, collation=settings.SEARCH_COLLATION)
        )
        created, skipped = seed_students(service)
        print(f"[Seed] Concluído! criados={created} já existentes={skipped}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
