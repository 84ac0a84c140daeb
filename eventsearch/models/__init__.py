"""eventsearch domain models: re-exports all public model classes.

    - event.py: Store rows (EventRecord), dropdown projection
                (EventSuggestion) and the Lifecycle enum
    - search.py: Expansion term sets and search/suggestion results
"""

from __future__ import annotations

from eventsearch.models.event import EventRecord, EventSuggestion, Lifecycle
from eventsearch.models.search import (
    ExpandedTermSet,
    LifecycleBuckets,
    SearchResults,
    SuggestionResult,
)

__all__ = [
    # event
    "EventRecord",
    "EventSuggestion",
    "Lifecycle",
    # search
    "ExpandedTermSet",
    "LifecycleBuckets",
    "SearchResults",
    "SuggestionResult",
]
