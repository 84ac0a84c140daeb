"""Pydantic v2 response schemas for the search API.

These are the HTTP contract the frontend reads.  Keys are camelCase
(``expandedTerms``, ``startsAt``) and ``expandedTerms`` is omitted from
the body entirely unless expansion produced more than the original term.
Routes serialise with ``response_model_exclude_unset=True`` and only set
the field when it has something to show; ``location: null`` and
``imageUrl: null`` on suggestions are still emitted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from eventsearch.models.event import EventSuggestion
from eventsearch.models.search import ExpandedTermSet


def visible_terms(term_set: ExpandedTermSet | None) -> list[str] | None:
    if term_set is None or not term_set.is_expanded:
        return None
    return list(term_set.terms)


class SuggestionsResponse(BaseModel):
    """Body of ``GET /search/suggestions``."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    suggestions: list[EventSuggestion] = Field(default_factory=list)
    expanded_terms: list[str] | None = Field(
        default=None,
        description="Terms actually searched; present only when expansion added any.",
    )

    @classmethod
    def from_result(
        cls,
        suggestions: list[EventSuggestion],
        term_set: ExpandedTermSet | None,
    ) -> SuggestionsResponse:
        fields: dict[str, Any] = {"suggestions": suggestions}
        terms = visible_terms(term_set)
        if terms is not None:
            fields["expanded_terms"] = terms
        return cls(**fields)


class SearchResultsResponse(BaseModel):
    """Body of ``GET /search/{query}``, bucketed by lifecycle."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    query: str
    slug: str
    total: int = 0
    upcoming: list[EventSuggestion] = Field(default_factory=list)
    happening: list[EventSuggestion] = Field(default_factory=list)
    past: list[EventSuggestion] = Field(default_factory=list)
    expanded_terms: list[str] | None = None


class PopularSearchesResponse(BaseModel):
    """Curated queries shown under an empty search box."""

    model_config = ConfigDict(frozen=True)

    queries: list[str]


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ProvidersResponse(BaseModel):
    """List of configured providers and their availability."""

    providers: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
