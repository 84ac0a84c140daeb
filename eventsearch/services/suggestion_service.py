"""Type-ahead suggestions and full search over the event store.

Both operations share one pipeline:

    query ──trim──> QueryExpander ──terms──> IEventStore ──records──> classify

``suggest`` feeds the dropdown: a handful of hits, newest start first,
each tagged with its lifecycle.  ``search`` feeds the results page: a
larger page of hits split into upcoming / happening / past buckets.

Neither ever raises on collaborator failure.  Expansion failures are
absorbed by the expander (identity set); store failures are logged here
and produce an empty hit list.  To the visitor, "the store is down" and
"nothing matched" look the same.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from eventsearch.interfaces.event_store import IEventStore
from eventsearch.models.event import EventRecord
from eventsearch.models.search import ExpandedTermSet, SearchResults, SuggestionResult
from eventsearch.services.lifecycle import categorize, to_suggestion, utc_now
from eventsearch.services.query_expander import QueryExpander
from eventsearch.utils.errors import EventSearchError
from eventsearch.utils.logging import get_logger
from eventsearch.utils.text_normalizer import normalize_query

# Below this many characters (after trimming) no work is done at all.
MIN_QUERY_LENGTH = 2


class SuggestionService:
    """Read-only search over published events.

    Parameters
    ----------
    expander:
        Produces the term set for each query.
    store:
        The event store to query.
    suggestion_limit:
        Dropdown size.
    search_limit:
        Results-page size.
    clock:
        Returns the current UTC instant; injectable for tests.
    """

    def __init__(
        self,
        expander: QueryExpander,
        store: IEventStore,
        *,
        suggestion_limit: int = 6,
        search_limit: int = 50,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._expander = expander
        self._store = store
        self._suggestion_limit = suggestion_limit
        self._search_limit = search_limit
        self._clock = clock
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # -- Public API -----------------------------------------------------------

    async def suggest(self, raw_query: str | None, locale: str | None = None) -> SuggestionResult:
        """Return dropdown suggestions for *raw_query*.

        Queries shorter than :data:`MIN_QUERY_LENGTH` after trimming return
        an empty result without touching the expander or the store.

        Parameters
        ----------
        raw_query:
            The search box contents, untrimmed.
        locale:
            The visitor's UI locale, passed through to the expander.

        Returns
        -------
        SuggestionResult
            Up to ``suggestion_limit`` suggestions ordered by start time
            descending, plus the term set used (``None`` for short queries).
        """
        query = normalize_query(raw_query)
        # One character matches half the catalogue and costs a model call
        # per keystroke; the dropdown stays closed instead.
        if len(query) < MIN_QUERY_LENGTH:
            return SuggestionResult()

        terms = await self._expander.expand(query, locale=locale)
        records = await self._fetch(terms, self._suggestion_limit)

        # One instant for the whole page so neighbouring rows never disagree.
        now = self._clock()
        suggestions = [to_suggestion(record, now) for record in records]

        self._logger.info(
            "suggestions_served",
            query_preview=query[:50],
            terms=len(terms.terms),
            results=len(suggestions),
        )
        return SuggestionResult(suggestions=suggestions, expanded_terms=terms)

    async def search(self, raw_query: str | None, locale: str | None = None) -> SearchResults:
        """Return bucketed results for the full search page.

        Unlike :meth:`suggest` there is no minimum length; a blank query
        returns empty buckets.
        """
        query = normalize_query(raw_query)
        if not query:
            return SearchResults(query="")

        terms = await self._expander.expand(query, locale=locale)
        records = await self._fetch(terms, self._search_limit)
        buckets = categorize(records, self._clock())

        self._logger.info(
            "search_served",
            query_preview=query[:50],
            terms=len(terms.terms),
            upcoming=len(buckets.upcoming),
            happening=len(buckets.happening),
            past=len(buckets.past),
        )
        return SearchResults(query=query, buckets=buckets, expanded_terms=terms)

    # -- Private helpers ------------------------------------------------------

    async def _fetch(self, terms: ExpandedTermSet, limit: int) -> list[EventRecord]:
        """Query the store, turning any failure into an empty hit list."""
        try:
            return await self._store.search_published(terms.terms, limit=limit)
        except EventSearchError as exc:
            # To the visitor a failing store looks like "no matches"; the
            # error stays in the logs.
            self._logger.error(
                "event_store_query_failed",
                provider=exc.provider_name,
                error=exc.message,
                terms=len(terms.terms),
            )
        except Exception:
            # Anything the adapter did not wrap still must not become a 5xx.
            self._logger.exception(
                "event_store_query_failed",
                provider=self._store.get_provider_name(),
                terms=len(terms.terms),
            )
        return []
