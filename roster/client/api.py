from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from roster.core.errors import TransientError, error_from_response
from roster.core.logging import get_logger

log = get_logger(__name__)


class StudentsApi:
    """Thin async HTTP client for the /students endpoints.

    Error responses are raised as the typed errors of ``roster.core.errors``;
    transport failures (connection refused, timeouts) become ``TransientError``.
    Nothing is retried.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    @classmethod
    def from_base_url(cls, base_url: str, *, timeout: float = 10.0) -> StudentsApi:
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            resp = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("api.transport_error", method=method, url=url, error=str(exc))
            raise TransientError("Can't reach the student service") from exc

        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            raise error_from_response(resp.status_code, body)
        return resp.json()

    async def list(self, *, page: int, limit: int) -> dict:
        return await self._request(
            "GET", "/students", params={"page": page, "limit": limit}
        )

    async def search(self, text: str, *, page: int, limit: int) -> dict:
        encoded = quote(text.strip(), safe="")
        return await self._request(
            "GET",
            f"/students/search/{encoded}",
            params={"page": page, "limit": limit},
        )

    async def get(self, student_pk: str) -> dict:
        return await self._request("GET", f"/students/{quote(str(student_pk), safe='')}")

    async def create(self, student: dict) -> dict:
        return await self._request("POST", "/students", json=student)

    async def update(self, student_pk: str, student: dict) -> dict:
        body = {k: v for k, v in student.items() if k != "_id"}
        return await self._request(
            "PUT", f"/students/{quote(str(student_pk), safe='')}", json=body
        )

    async def delete(self, student_pk: str) -> dict:
        return await self._request(
            "DELETE", f"/students/{quote(str(student_pk), safe='')}"
        )
