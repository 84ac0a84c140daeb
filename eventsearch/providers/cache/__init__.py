"""Cache providers.

MemoryCacheProvider keeps query expansions for a few minutes so repeated
type-ahead queries skip the LLM round-trip.  It is not shared across
processes; for multi-worker deployments, implement ICacheProvider over
Redis without touching the services.
"""

from eventsearch.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
