"""In-process event store.

Holds a list of :class:`EventRecord` in memory and applies the same
matching rule as the Supabase adapter: any term, case-insensitive literal
substring, over title / description / location label; published only;
newest start first.

Used when ``SUPABASE_URL`` is not set (local development serves from
``EVENTS_FIXTURE_PATH``) and in tests.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import ValidationError

from eventsearch.interfaces.event_store import IEventStore
from eventsearch.models.event import EventRecord
from eventsearch.utils.errors import ConfigurationError
from eventsearch.utils.logging import get_logger
from eventsearch.utils.pattern_filter import SEARCH_FIELDS, contains_literal

_logger = get_logger(__name__)


class MemoryEventStore(IEventStore):
    """Event store over an in-memory list of records.

    *search_fields* names the :class:`EventRecord` attributes each term is
    matched against, mirroring the Supabase column list.
    """

    def __init__(
        self,
        events: Iterable[EventRecord] = (),
        search_fields: Sequence[str] = SEARCH_FIELDS,
    ) -> None:
        self._events: list[EventRecord] = list(events)
        self._search_fields = tuple(search_fields)

    @classmethod
    def from_json_file(
        cls,
        path: str | Path,
        search_fields: Sequence[str] = SEARCH_FIELDS,
    ) -> MemoryEventStore:
        """Load events from a JSON array of store-shaped rows.

        A missing file yields an empty store.  Rows that fail validation
        are skipped with a warning, as in the Supabase adapter.

        Raises
        ------
        ConfigurationError
            If the file exists but is not a JSON array.
        """
        fixture = Path(path)
        if not fixture.exists():
            _logger.warning("events_fixture_missing", path=str(fixture))
            return cls(search_fields=search_fields)

        try:
            rows = json.loads(fixture.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Events fixture {fixture} is not valid JSON") from exc
        if not isinstance(rows, list):
            raise ConfigurationError(f"Events fixture {fixture} must hold a JSON array")

        events: list[EventRecord] = []
        for row in rows:
            try:
                events.append(EventRecord.from_row(row))
            except ValidationError as exc:
                _logger.warning(
                    "events_fixture_row_invalid",
                    event_id=row.get("id") if isinstance(row, dict) else None,
                    errors=exc.error_count(),
                )
        _logger.info("events_fixture_loaded", path=str(fixture), events=len(events))
        return cls(events, search_fields=search_fields)

    async def search_published(
        self,
        terms: Sequence[str],
        *,
        limit: int,
    ) -> list[EventRecord]:
        if not terms or limit <= 0:
            return []
        matches = [
            event
            for event in self._events
            if event.status == "published" and self._matches(event, terms)
        ]
        matches.sort(key=lambda event: event.starts_at, reverse=True)
        return matches[:limit]

    def get_provider_name(self) -> str:
        return "memory"

    def is_available(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._events)

    def _matches(self, event: EventRecord, terms: Sequence[str]) -> bool:
        values = (getattr(event, name, None) for name in self._search_fields)
        fields = [value for value in values if isinstance(value, str)]
        return any(contains_literal(value, term) for term in terms for value in fields)
