"""Error taxonomy shared by the API service and the HTTP client.

Each error carries a ``kind`` tag so callers can branch on the failure
category instead of matching message strings. The same tag travels on the
wire in the ``{"message", "kind"}`` error body.
"""

from __future__ import annotations

from fastapi import status


class RosterError(Exception):
    kind: str = "transient"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, str]:
        return {"message": self.message, "kind": self.kind}


class ValidationError(RosterError):
    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid student data"


class ConflictError(RosterError):
    kind = "conflict"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Student ID already exists"


class NotFoundError(RosterError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Student not found"


class TransientError(RosterError):
    kind = "transient"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


ERRORS_BY_KIND: dict[str, type[RosterError]] = {
    cls.kind: cls
    for cls in (ValidationError, ConflictError, NotFoundError, TransientError)
}


def error_from_response(status_code: int, body: object) -> RosterError:
    """Rebuild a typed error from an HTTP error response."""
    message = None
    kind = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        kind = body.get("kind")
        if not isinstance(message, str):
            message = None

    cls = ERRORS_BY_KIND.get(kind) if isinstance(kind, str) else None
    if cls is None:
        if status_code == status.HTTP_404_NOT_FOUND:
            cls = NotFoundError
        elif 400 <= status_code < 500:
            cls = ValidationError
        else:
            cls = TransientError
    return cls(message)
