import pytest

from roster.core.errors import ConflictError, NotFoundError, ValidationError
from roster.db.student_store import StudentStore, escape_like
from roster.services.student_query import (
    MAX_SQL_INT,
    PageRequest,
    StudentQueryService,
    parse_page_request,
    parse_student_id,
    total_pages,
)


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, PageRequest(1, 10)),
        ("2", "5", PageRequest(2, 5)),
        (3, 7, PageRequest(3, 7)),
        ("0", "-4", PageRequest(1, 10)),
        ("x", "1.5", PageRequest(1, 10)),
        (" 4 ", "", PageRequest(4, 10)),
        (1, 5000, PageRequest(1, 100)),
        ("1_0", "2_5", PageRequest(1, 10)),
        ("٣", "-0", PageRequest(1, 10)),
    ],
)
def test_parse_page_request(page, limit, expected):
    assert parse_page_request(page, limit, default_limit=10, max_limit=100) == expected


def test_page_request_skip():
    assert PageRequest(page=3, limit=5).skip == 10


@pytest.mark.parametrize(
    "total,limit,expected", [(0, 5, 0), (1, 5, 1), (5, 5, 1), (6, 5, 2), (12, 5, 3)]
)
def test_total_pages(total, limit, expected):
    assert total_pages(total, limit) == expected


@pytest.mark.parametrize(
    "raw", ["abc", "", "0", "-3", None, "1_0", " 7", "٣", str(2**63), 2**63]
)
def test_parse_student_id_rejects_garbage(raw):
    with pytest.raises(NotFoundError):
        parse_student_id(raw)


def test_escape_like():
    assert escape_like("50%_a\\b") == "50\\%\\_a\\\\b"


def test_list_twelve_records(service, make_students):
    rows = make_students(12)

    page = service.list_students(page=1, limit=5)

    assert [s.student_id for s in page.students] == [r.student_id for r in rows[:5]]
    assert page.pagination.totalPages == 3
    assert page.pagination.total == 12


def test_search_counts_only_matches(service, make_students, anne):
    make_students(8)

    page = service.search_students("ANNE", page=1, limit=5)

    assert page.pagination.total == 1
    assert page.pagination.totalPages == 1
    assert page.students[0].firstname == "Anne"


def test_search_none_or_blank_is_list(service, make_students):
    make_students(4)

    assert service.search_students(None) == service.list_students()
    assert service.search_students("  \t") == service.list_students()


def test_create_student(service):
    st = service.create_student({"student_id": " 42 ", "firstname": " Ann "})

    assert st.id is not None
    assert st.student_id == "42"
    assert st.firstname == "Ann"
    assert st.lastname == ""


def test_create_requires_firstname(service):
    with pytest.raises(ValidationError) as exc_info:
        service.create_student({"student_id": "42"})

    assert "firstname is required" in exc_info.value.message


def test_create_duplicate_leaves_count_unchanged(service, store, anne):
    before = store.count()

    with pytest.raises(ConflictError):
        service.create_student({"student_id": anne.student_id, "firstname": "Copy"})

    assert store.count() == before


def test_store_unique_index_reports_conflict(store, anne):
    # bypasses the lookup: the index itself still rejects the duplicate
    with pytest.raises(ConflictError):
        store.insert_one({"student_id": anne.student_id, "firstname": "Race"})

    assert store.count() == 1


def test_update_keeps_own_student_id(service, anne):
    st = service.update_student(
        anne.id,
        {"student_id": anne.student_id, "firstname": "Anne", "lastname": "Blythe"},
    )

    assert st.id == anne.id
    assert st.lastname == "Blythe"
    assert st.nickname == ""


def test_update_to_other_records_student_id(service, anne):
    other = service.create_student({"student_id": "B2", "firstname": "Gilbert"})

    with pytest.raises(ConflictError):
        service.update_student(
            other.id, {"student_id": anne.student_id, "firstname": "Gilbert"}
        )


def test_update_missing_record(service):
    with pytest.raises(NotFoundError):
        service.update_student(777, {"student_id": "Z", "firstname": "Zed"})


def test_update_conflict_checked_before_existence(service, anne):
    with pytest.raises(ConflictError):
        service.update_student(777, {"student_id": anne.student_id, "firstname": "Z"})


def test_delete_missing_changes_nothing(service, store, anne):
    with pytest.raises(NotFoundError):
        service.delete_student(anne.id + 1)

    assert store.count() == 1


def test_deleted_ids_are_not_reused(service):
    first = service.create_student({"student_id": "A", "firstname": "A"})
    first_id = first.id
    service.delete_student(first_id)

    second = service.create_student({"student_id": "B", "firstname": "B"})

    assert second.id != first_id


def test_get_student(service, anne):
    assert service.get_student(str(anne.id)).student_id == anne.student_id
    with pytest.raises(NotFoundError):
        service.get_student("nope")


def test_max_limit_caps_page_size(db_session, make_students):
    make_students(6)
    capped = StudentQueryService(StudentStore(db_session), max_limit=4)

    page = capped.list_students(limit=50)

    assert page.pagination.limit == 4
    assert len(page.students) == 4
    assert page.pagination.totalPages == 2


def test_parse_student_id_accepts_upper_bound():
    assert parse_student_id(str(MAX_SQL_INT)) == MAX_SQL_INT


def test_page_beyond_database_range_is_empty(service, make_students):
    make_students(3)

    page = service.list_students(page=str(2**70), limit=5)

    assert page.students == []
    assert page.pagination.total == 3
    assert page.pagination.page == 2**70


def test_unbounded_limit_is_clamped(db_session, make_students):
    make_students(2)
    uncapped = StudentQueryService(StudentStore(db_session), max_limit=None)

    page = uncapped.list_students(limit=str(2**70))

    assert page.pagination.limit == MAX_SQL_INT
    assert len(page.students) == 2
