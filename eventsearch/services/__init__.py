"""Search services: query expansion, lifecycle classification, suggestions."""

from eventsearch.services.lifecycle import categorize, classify
from eventsearch.services.query_expander import QueryExpander, parse_expansion_response
from eventsearch.services.suggestion_service import MIN_QUERY_LENGTH, SuggestionService

__all__ = [
    "MIN_QUERY_LENGTH",
    "QueryExpander",
    "SuggestionService",
    "categorize",
    "classify",
    "parse_expansion_response",
]
