"""Abstract base class for the event store.

The event store is an external, multi-tenant collaborator that eventsearch
only ever reads.  The single capability required of it is a case-insensitive
substring search over the searchable text fields, restricted to published
events and ordered by start time, most recent first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from eventsearch.models.event import EventRecord


# Concrete implementations: SupabaseEventStore, MemoryEventStore
# Located in: eventsearch/providers/event_store/
class IEventStore(ABC):
    """Contract for read-only event lookups."""

    @abstractmethod
    async def search_published(
        self,
        terms: Sequence[str],
        *,
        limit: int,
    ) -> list[EventRecord]:
        """Return published events matching any of *terms*.

        A record matches when any term is a case-insensitive literal
        substring of its title, description or location label.

        Parameters
        ----------
        terms:
            Expansion terms, trimmed and deduplicated.  Implementations
            must treat them as literals (no wildcard interpretation).
        limit:
            Maximum number of records to return.

        Returns
        -------
        list[EventRecord]
            Matches ordered by ``starts_at`` descending.

        Raises
        ------
        eventsearch.utils.errors.EventStoreError
            If the store rejects the query or returns malformed data.
        eventsearch.utils.errors.ProviderUnavailableError
            If the store cannot be reached.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"supabase"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store is configured."""
