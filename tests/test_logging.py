import structlog

from roster.core.logging import set_request_id


def test_set_request_id_binds_structlog_context():
    structlog.contextvars.clear_contextvars()

    assert set_request_id("abc-123") == "abc-123"
    assert structlog.contextvars.get_contextvars()["request_id"] == "abc-123"

    structlog.contextvars.clear_contextvars()


def test_set_request_id_generates_one_when_missing():
    structlog.contextvars.clear_contextvars()

    rid = set_request_id(None)

    assert rid
    assert structlog.contextvars.get_contextvars()["request_id"] == rid
    structlog.contextvars.clear_contextvars()
