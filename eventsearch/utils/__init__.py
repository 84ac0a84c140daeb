"""Utility modules for eventsearch.

- **errors** -- Exception hierarchy rooted at EventSearchError; providers
  raise these, services catch them and degrade.
- **logging** -- structlog setup with a console renderer in development
  and JSON in production, plus request-context binding helpers.
- **pattern_filter** -- Escaping and ``or=(...)`` construction for the
  event store's substring filter.
- **text_normalizer** -- Query trimming, term deduplication and search
  slug helpers.
"""

from eventsearch.utils.errors import (
    ConfigurationError,
    EventSearchError,
    EventStoreError,
    LLMError,
    ProviderUnavailableError,
)
from eventsearch.utils.logging import configure_logging, get_logger
from eventsearch.utils.pattern_filter import (
    SEARCH_FIELDS,
    build_or_filter,
    contains_literal,
    escape_like_term,
    escape_pattern_term,
    quote_filter_value,
)
from eventsearch.utils.text_normalizer import (
    dedupe_terms,
    from_search_slug,
    normalize_query,
    query_cache_key,
    to_search_slug,
)

__all__ = [
    "ConfigurationError",
    "EventSearchError",
    "EventStoreError",
    "LLMError",
    "ProviderUnavailableError",
    "SEARCH_FIELDS",
    "build_or_filter",
    "configure_logging",
    "contains_literal",
    "dedupe_terms",
    "escape_like_term",
    "escape_pattern_term",
    "from_search_slug",
    "get_logger",
    "normalize_query",
    "query_cache_key",
    "quote_filter_value",
    "to_search_slug",
]
