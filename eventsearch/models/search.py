"""Pydantic v2 models for search queries and their results.

``ExpandedTermSet`` enforces the expansion invariants in one place, so no
caller has to re-check them:

- the (trimmed) original query is always present, and always first;
- every term is non-empty after trimming;
- terms are unique case-insensitively (first spelling wins);
- the set never exceeds the configured cap.

Order matters only for building the OR filter; results are never ranked
by which term matched.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventsearch.models.event import EventSuggestion
from eventsearch.utils.text_normalizer import dedupe_terms, normalize_query


class ExpandedTermSet(BaseModel):
    """Ordered alternative spellings / translations of one query."""

    model_config = ConfigDict(frozen=True)

    original: str = Field(min_length=1)
    terms: tuple[str, ...]

    @model_validator(mode="before")
    @classmethod
    def _enforce_invariants(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        original = normalize_query(data.get("original"))
        terms = dedupe_terms([original, *(data.get("terms") or ())])
        return {**data, "original": original, "terms": tuple(terms)}

    @classmethod
    def identity(cls, query: str) -> ExpandedTermSet:
        """The degraded set: just the original query."""
        return cls(original=query, terms=(query,))

    @classmethod
    def from_candidates(
        cls,
        query: str,
        candidates: Iterable[str],
        max_terms: int,
    ) -> ExpandedTermSet:
        """Build a set from model output, keeping the original first.

        Parameters
        ----------
        query:
            The user's query; always kept.
        candidates:
            Alternative strings in the order the model ranked them.
        max_terms:
            Cap on the resulting set size (including the original).
        """
        terms = dedupe_terms([query, *candidates])
        return cls(original=query, terms=tuple(terms[: max(1, max_terms)]))

    @property
    def is_expanded(self) -> bool:
        """``True`` when the set holds more than the original term."""
        return len(self.terms) > 1


class SuggestionResult(BaseModel):
    """Outcome of one ``suggest()`` call."""

    model_config = ConfigDict(frozen=True)

    suggestions: list[EventSuggestion] = Field(default_factory=list)
    expanded_terms: ExpandedTermSet | None = None


class LifecycleBuckets(BaseModel):
    """Search hits split by lifecycle for the full results page."""

    model_config = ConfigDict(frozen=True)

    upcoming: list[EventSuggestion] = Field(default_factory=list)
    happening: list[EventSuggestion] = Field(default_factory=list)
    past: list[EventSuggestion] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.upcoming) + len(self.happening) + len(self.past)


class SearchResults(BaseModel):
    """Outcome of one full ``search()`` call."""

    model_config = ConfigDict(frozen=True)

    query: str
    buckets: LifecycleBuckets = Field(default_factory=LifecycleBuckets)
    expanded_terms: ExpandedTermSet | None = None
