"""Repository backed by a Supabase project through its PostgREST API.

Rows use the snake_case column names of the ``spaces`` and ``bookings``
tables, which are also the model field names, so mapping is a plain
``model_dump`` / ``model_validate``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from zenspace.domain.errors import NotFoundError, RepositoryError
from zenspace.domain.models import Booking, Space

logger = logging.getLogger(__name__)


class SupabaseRepository:
    """CRUD over the hosted ``spaces``/``bookings`` tables.

    Reads are idempotent and retried with exponential backoff; writes are
    attempted once.
    """

    RETRY_STATUS_CODES = {408, 429, 500, 502, 503, 504}
    MAX_BACKOFF_SECONDS = 5.0

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        read_retries: int = 2,
        backoff_seconds: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url:
            raise ValueError("SUPABASE_URL is required for the supabase backend")
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.read_retries = read_retries
        self.backoff_seconds = backoff_seconds
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=5.0)
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_seconds * (2**attempt), self.MAX_BACKOFF_SECONDS)

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        prefer: str | None = None,
        retries: int = 0,
    ) -> Any:
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer
        url = f"{self.base_url}/{table}"

        last_error = "request failed"
        for attempt in range(retries + 1):
            try:
                response = await self.client.request(
                    method, url, params=params, json=json, headers=headers
                )
            except httpx.HTTPError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                if response.status_code < 400:
                    if not response.content:
                        return None
                    try:
                        return response.json()
                    except ValueError:
                        last_error = f"undecodable body: {response.text[:200]!r}"
                        break
                last_error = f"HTTP {response.status_code}: {response.text[:200]}"
                if response.status_code not in self.RETRY_STATUS_CODES:
                    break

            if attempt < retries:
                delay = self._backoff(attempt)
                logger.warning(
                    "%s %s failed (%s), retrying in %.1fs",
                    method,
                    table,
                    last_error,
                    delay,
                )
                await asyncio.sleep(delay)

        logger.error("%s %s failed: %s", method, table, last_error)
        raise RepositoryError(f"{method} {table} failed: {last_error}")

    # -- spaces -------------------------------------------------------------

    async def list_spaces(self) -> list[Space]:
        rows = await self._request(
            "GET",
            "spaces",
            params={"select": "*", "order": "name.asc"},
            retries=self.read_retries,
        )
        return _parse_rows(Space, rows or [])

    async def insert_space(self, name: str, type: str, capacity: int) -> str:
        rows = await self._request(
            "POST",
            "spaces",
            json={"name": name, "type": type, "capacity": capacity},
            prefer="return=representation",
        )
        return _first_id(rows, "spaces")

    async def update_space(self, space: Space) -> None:
        rows = await self._request(
            "PATCH",
            "spaces",
            params={"id": f"eq.{space.id}"},
            json=space.model_dump(exclude={"id"}),
            prefer="return=representation",
        )
        if not rows:
            raise NotFoundError(f"Space {space.id} not found")

    async def delete_space(self, space_id: str) -> None:
        await self._request("DELETE", "spaces", params={"id": f"eq.{space_id}"})

    # -- bookings -----------------------------------------------------------

    async def list_bookings(self, day: str) -> list[Booking]:
        rows = await self._request(
            "GET",
            "bookings",
            params={"select": "*", "date": f"eq.{day}"},
            retries=self.read_retries,
        )
        return _parse_rows(Booking, rows or [])

    async def insert_booking(self, booking: Booking) -> str:
        rows = await self._request(
            "POST",
            "bookings",
            json=_booking_row(booking),
            prefer="return=representation",
        )
        return _first_id(rows, "bookings")

    async def update_booking(self, booking_id: str, booking: Booking) -> None:
        rows = await self._request(
            "PATCH",
            "bookings",
            params={"id": f"eq.{booking_id}"},
            json=_booking_row(booking),
            prefer="return=representation",
        )
        if not rows:
            raise NotFoundError(f"Booking {booking_id} not found")

    async def delete_booking(self, booking_id: str) -> None:
        await self._request("DELETE", "bookings", params={"id": f"eq.{booking_id}"})

    async def count_bookings_for_space(self, space_id: str) -> int:
        rows = await self._request(
            "GET",
            "bookings",
            params={"select": "id", "space_id": f"eq.{space_id}"},
            retries=self.read_retries,
        )
        return len(rows or [])


def _booking_row(booking: Booking) -> dict[str, Any]:
    row = booking.model_dump(mode="json", exclude={"id"})
    if row.get("notes") is None:
        row.pop("notes", None)
    return row


def _first_id(rows: Any, table: str) -> str:
    if not rows:
        raise RepositoryError(f"Insert into {table} returned no row")
    try:
        return str(rows[0]["id"])
    except (KeyError, TypeError, IndexError) as exc:
        raise RepositoryError(f"Insert into {table} returned {rows!r}") from exc


def _parse_rows(model, rows: Any) -> list:
    if not isinstance(rows, list):
        raise RepositoryError(f"Expected a list of {model.__name__} rows")
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed %s row %s: %s",
                model.__name__,
                row.get("id") if isinstance(row, dict) else None,
                exc.errors()[0]["msg"] if exc.errors() else exc,
            )
    return parsed
