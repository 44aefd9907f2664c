"""Client-side query coordination for the student list screen.

``QueryCoordinator`` owns what the operator sees: the raw and debounced
search text, the current page, the page size and the busy flag. It picks
between a plain listing and a search on every fetch, and refreshes the
visible page after each successful mutation.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from roster.client.api import StudentsApi
from roster.client.debounce import Debouncer
from roster.core.errors import RosterError, TransientError
from roster.core.logging import get_logger

log = get_logger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_DEBOUNCE_SECONDS = 0.5

FETCH_FAILED = "Failed to fetch students. Please try again."
SAVE_FAILED = "An error occurred while saving the student."
DELETE_FAILED = "An error occurred while deleting the student."


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def failure(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: success is transient, failure is blocking in a UI."""

    def success(self, message: str) -> None:
        log.info("notify.success", message=message)

    def failure(self, message: str) -> None:
        log.warning("notify.failure", message=message)


@dataclass
class Pagination:
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_LIMIT
    totalPages: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pagination:
        return cls(
            total=int(data.get("total", 0)),
            page=int(data.get("page", 1)),
            limit=int(data.get("limit", DEFAULT_LIMIT)),
            totalPages=int(data.get("totalPages", 0)),
        )


Confirm = Callable[[], bool | Awaitable[bool]]


@dataclass
class QueryCoordinator:
    api: StudentsApi
    limit: int = DEFAULT_LIMIT
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    notifier: Notifier = field(default_factory=LoggingNotifier)

    search_text: str = field(default="", init=False)
    debounced_text: str = field(default="", init=False)
    page: int = field(default=1, init=False)
    loading: bool = field(default=False, init=False)
    students: list[dict[str, Any]] = field(default_factory=list, init=False)
    pagination: Pagination = field(init=False)

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be >= 1")
        self.pagination = Pagination(limit=self.limit)
        self._debouncer = Debouncer(self.debounce_seconds)
        self._seq = 0
        self._read_pending = False
        self._mutations_pending = 0

    @property
    def total_pages(self) -> int:
        return self.pagination.totalPages

    @property
    def settled(self) -> bool:
        tp = self.pagination.totalPages
        return tp == 0 or 1 <= self.page <= tp

    def _sync_loading(self) -> None:
        # busy while the latest read or any mutation is in flight
        self.loading = self._read_pending or self._mutations_pending > 0

    # --- search text
    def set_search_text(self, text: str) -> None:
        self.search_text = text
        self._debouncer.schedule(self._apply_debounced, text)

    async def _apply_debounced(self, text: str) -> None:
        if text == self.debounced_text:
            return
        self.debounced_text = text
        self.page = 1
        await self.refresh()

    async def clear_search(self) -> None:
        self._debouncer.cancel()
        self.search_text = ""
        self.debounced_text = ""
        self.page = 1
        await self.refresh()

    # --- reads
    async def refresh(self) -> bool:
        """Issue one list or search read for the current state.

        Returns False when the read failed or its response was superseded by a
        newer read.
        """
        self._seq += 1
        seq = self._seq
        term = self.debounced_text.strip()
        self._read_pending = True
        self._sync_loading()
        try:
            if term:
                log.debug("coordinator.search", term=term, page=self.page, seq=seq)
                data = await self.api.search(term, page=self.page, limit=self.limit)
            else:
                log.debug("coordinator.list", page=self.page, seq=seq)
                data = await self.api.list(page=self.page, limit=self.limit)
        except RosterError as exc:
            if seq == self._seq:
                log.warning("coordinator.fetch_failed", kind=exc.kind, error=exc.message)
                self.notifier.failure(FETCH_FAILED)
            return False
        finally:
            if seq == self._seq:
                self._read_pending = False
                self._sync_loading()

        if seq != self._seq:
            log.info("coordinator.stale_response", seq=seq, latest=self._seq)
            return False

        self.students = list(data.get("students", []))
        self.pagination = Pagination.from_dict(data.get("pagination", {}))
        self.page = self.pagination.page
        return True

    async def go_to_page(self, page: int) -> bool:
        if page < 1 or page > self.total_pages or self.loading:
            log.debug(
                "coordinator.page_rejected",
                page=page,
                total_pages=self.total_pages,
                loading=self.loading,
            )
            return False
        self.page = page
        await self.refresh()
        return True

    async def set_limit(self, limit: int) -> bool:
        if limit < 1 or self.loading:
            return False
        self.limit = limit
        self.page = 1
        await self.refresh()
        return True

    # --- mutations
    async def _mutate(
        self, call: Awaitable[dict], success: str, failure: str
    ) -> dict | None:
        self._mutations_pending += 1
        self._sync_loading()
        try:
            result = await call
        except RosterError as exc:
            log.warning("coordinator.mutation_failed", kind=exc.kind, error=exc.message)
            message = failure if isinstance(exc, TransientError) else exc.message
            self.notifier.failure(message)
            return None
        finally:
            self._mutations_pending -= 1
            self._sync_loading()
        # the mutation itself succeeded; a failed refresh is reported separately
        self.notifier.success(success)
        await self.refresh()
        return result

    async def create_student(self, student: dict[str, Any]) -> dict | None:
        return await self._mutate(
            self.api.create(student), "Student added successfully!", SAVE_FAILED
        )

    async def update_student(
        self, student_pk: str, student: dict[str, Any]
    ) -> dict | None:
        return await self._mutate(
            self.api.update(student_pk, student),
            "Student updated successfully!",
            SAVE_FAILED,
        )

    async def delete_student(self, student_pk: str, confirm: Confirm) -> bool:
        answer = confirm()
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            log.info("coordinator.delete_declined", id=student_pk)
            return False
        result = await self._mutate(
            self.api.delete(student_pk), "Student has been deleted.", DELETE_FAILED
        )
        return result is not None

    # --- lifecycle
    async def wait_idle(self) -> None:
        await self._debouncer.drain()

    def close(self) -> None:
        self._debouncer.cancel()
