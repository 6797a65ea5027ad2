"""Venue store access over the hosted PostgREST API."""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from venue_map.models import VenueRecord

logger = logging.getLogger(__name__)

USER_AGENT = "venue-map/1.0"

_venue_list = TypeAdapter(list[VenueRecord])


class StoreError(Exception):
    """A store request failed or returned rows that could not be decoded."""


class VenueStore:
    """Thin request/response client for the venue tables.

    Every call opens its own client; pages are requested with offset/limit
    and ordered by id so consecutive pages never overlap.
    """

    def __init__(
        self, base_url: str, api_key: str = "",
        venue_table: str = "Venue", timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.venue_table = venue_table
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _select(self, table: str, params: dict) -> list[dict]:
        url = f"{self.base_url}/rest/v1/{table}"
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            try:
                response = await client.get(url, params=params)
                response.raise_for_status()
                rows = response.json()
            except httpx.TimeoutException as exc:
                logger.warning("Store request to %s timed out: %s", table, exc)
                raise StoreError(f"Request to {table} timed out") from exc
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Store request to %s returned HTTP %s", table, exc.response.status_code
                )
                raise StoreError(
                    f"{table} request failed with HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                logger.warning("Store request to %s failed: %s", table, exc)
                raise StoreError(f"{table} request failed: {exc}") from exc
            except ValueError as exc:
                logger.warning("Store response from %s is not JSON: %s", table, exc)
                raise StoreError(f"{table} returned malformed JSON") from exc

        if not isinstance(rows, list):
            raise StoreError(f"{table} returned {type(rows).__name__}, expected a list of rows")
        return rows

    async def fetch_page(self, entity: str, offset: int, limit: int) -> list[dict]:
        """Fetch rows [offset, offset + limit - 1] of a table, ordered by id."""
        return await self._select(entity, {
            "select": "*",
            "order": "id.asc",
            "offset": offset,
            "limit": limit,
        })

    async def fetch_venue_page(self, offset: int, limit: int) -> list[VenueRecord]:
        rows = await self.fetch_page(self.venue_table, offset, limit)
        try:
            return _venue_list.validate_python(rows)
        except ValidationError as exc:
            logger.warning(
                "Could not decode %s rows at offset %d: %d error(s)",
                self.venue_table, offset, exc.error_count(),
            )
            raise StoreError(f"Could not decode {self.venue_table} rows: {exc}") from exc

    async def fetch_regions(self) -> list[str]:
        """Distinct, trimmed, non-empty county names, sorted."""
        rows = await self._select(self.venue_table, {"select": "county"})
        return _distinct(row.get("county") for row in rows)

    async def fetch_authorities(self, region: str) -> list[str]:
        """Distinct local authorities of venues in one county, sorted."""
        rows = await self._select(self.venue_table, {
            "select": "local_authority,county",
            "county": f"eq.{region}",
        })
        return _distinct(row.get("local_authority") for row in rows)


def _distinct(values) -> list[str]:
    cleaned = {v.strip() for v in values if isinstance(v, str)}
    cleaned.discard("")
    return sorted(cleaned)
