"""Public interface definitions for all external collaborators.

Every external service eventsearch touches is reached only through the
abstract base classes in this package; concrete adapters live in
``eventsearch/providers/`` and are chosen at startup in
``eventsearch/main.py``.  Tests inject mocks or the in-memory adapters.

    Interface      →  Concrete implementations (in eventsearch/providers/)
    ─────────────────────────────────────────────────────────────────────
    ILLMProvider   →  AnthropicLLMProvider, OpenAILLMProvider,
                      OllamaLLMProvider
    IEventStore    →  SupabaseEventStore, MemoryEventStore
    ICacheProvider →  MemoryCacheProvider
"""

from eventsearch.interfaces.cache_provider import ICacheProvider
from eventsearch.interfaces.event_store import IEventStore
from eventsearch.interfaces.llm_provider import ILLMProvider

__all__ = [
    "ICacheProvider",
    "IEventStore",
    "ILLMProvider",
]
