"""Supabase (PostgREST) event store adapter.

Reads the ``events`` table through Supabase's REST endpoint
(``{SUPABASE_URL}/rest/v1/events``) with the public anon key, so only
rows that row-level security exposes to anonymous visitors are visible.

One request per search::

    GET /rest/v1/events
        ?select=id,slug,title,...
        &status=eq.published
        &or=(title.ilike."%yoga%",description.ilike."%yoga%",...)
        &order=starts_at.desc
        &limit=6

The ``or`` clause is built by
:func:`~eventsearch.utils.pattern_filter.build_or_filter`, which escapes
every term.  Rows are validated into :class:`EventRecord` here and
nowhere else.

Follows the same adapter shape as the other HTTP providers: injected
``httpx.AsyncClient``, typed return values, SDK/transport errors wrapped
in the eventsearch error hierarchy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from eventsearch.config.settings import Settings
from eventsearch.interfaces.event_store import IEventStore
from eventsearch.models.event import EventRecord
from eventsearch.utils.errors import EventStoreError, ProviderUnavailableError
from eventsearch.utils.logging import get_logger
from eventsearch.utils.pattern_filter import SEARCH_FIELDS, build_or_filter

_SELECT_COLUMNS = (
    "id,slug,title,description,location_name,image_url,starts_at,ends_at,status"
)


class SupabaseEventStore(IEventStore):
    """Event store backed by a Supabase project's PostgREST API.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient`` (created in the app lifespan).
    settings:
        Supplies ``supabase_url``, ``supabase_anon_key``, the table name
        and the per-request timeout.
    search_fields:
        Text columns each term is matched against (``search.fields`` in
        the YAML config).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        search_fields: Sequence[str] = SEARCH_FIELDS,
    ) -> None:
        self._http = http_client
        self._base_url = settings.supabase_url.rstrip("/")
        self._api_key = settings.supabase_anon_key
        self._table = settings.supabase_events_table
        self._timeout = settings.store_timeout_seconds
        self._search_fields = tuple(search_fields)
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IEventStore implementation
    # ------------------------------------------------------------------

    async def search_published(
        self,
        terms: Sequence[str],
        *,
        limit: int,
    ) -> list[EventRecord]:
        # An empty or=() is a PostgREST syntax error; skip the round trip.
        if not terms or limit <= 0:
            return []

        # RLS already hides drafts from the anon key; the status filter
        # keeps them out on projects where the policy is looser.
        params = {
            "select": _SELECT_COLUMNS,
            "status": "eq.published",
            "or": f"({build_or_filter(terms, self._search_fields)})",
            "order": "starts_at.desc",
            "limit": str(limit),
        }

        try:
            response = await self._http.get(
                f"{self._base_url}/rest/v1/{self._table}",
                params=params,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            # A slow store must not hold the dropdown open; the service
            # turns this into an empty result.
            raise ProviderUnavailableError(
                message=f"Event store timed out after {self._timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                message=f"Event store unreachable: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        # PostgREST reports filter parse errors as 400 with a JSON body.
        if response.status_code != 200:
            raise EventStoreError(
                message=f"HTTP {response.status_code}: {response.text[:200]}",
                provider_name=self.get_provider_name(),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise EventStoreError(
                message="Event store returned invalid JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(payload, list):
            raise EventStoreError(
                message=f"Expected a JSON array, got {type(payload).__name__}",
                provider_name=self.get_provider_name(),
            )

        return self._parse_rows(payload)

    def get_provider_name(self) -> str:
        return "supabase"

    def is_available(self) -> bool:
        return bool(self._base_url and self._api_key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        # Supabase wants the key both as apikey and as the bearer token.
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def _parse_rows(self, rows: list[Any]) -> list[EventRecord]:
        """Validate rows into records, dropping (and logging) malformed ones."""
        records: list[EventRecord] = []
        for row in rows:
            if not isinstance(row, dict):
                self._logger.warning("event_row_not_object", row_type=type(row).__name__)
                continue
            try:
                records.append(EventRecord.from_row(row))
            except ValidationError as exc:
                # One bad row must not hide the rest of the page.
                self._logger.warning(
                    "event_row_invalid",
                    event_id=row.get("id"),
                    errors=exc.error_count(),
                )
        return records
