"""Event store adapters.

    - SupabaseEventStore: PostgREST over httpx (production)
    - MemoryEventStore: in-process list, loaded from a JSON fixture
      when no Supabase URL is configured
"""

from eventsearch.providers.event_store.memory_store import MemoryEventStore
from eventsearch.providers.event_store.supabase_provider import SupabaseEventStore

__all__ = ["MemoryEventStore", "SupabaseEventStore"]
