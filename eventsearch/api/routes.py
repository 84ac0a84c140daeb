"""FastAPI routes for event search.

Service dependencies are resolved from ``app.state`` (populated at startup
by ``main._build_all``) through ``Depends`` helpers using the ``Annotated``
pattern.

Endpoint                      Method  Description
----------------------------  ------  -----------------------------------------
/search/suggestions?q=&locale GET     Type-ahead dropdown (expanded, 6 hits)
/search/popular               GET     Curated queries for an empty search box
/search/{query}               GET     Full results page, bucketed by lifecycle
/health                       GET     Health check + provider status
/providers                    GET     Configured providers

``/search/popular`` must be registered before ``/search/{query}`` or the
catch-all would swallow it.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from eventsearch.api.schemas import (
    ErrorResponse,
    HealthResponse,
    PopularSearchesResponse,
    ProvidersResponse,
    SearchResultsResponse,
    SuggestionsResponse,
    visible_terms,
)
from eventsearch.config.loader import DEFAULT_POPULAR_SEARCHES
from eventsearch.services.suggestion_service import SuggestionService
from eventsearch.utils.logging import get_logger
from eventsearch.utils.text_normalizer import from_search_slug, to_search_slug

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_VERSION = "0.1.0"
_DEFAULT_MAX_SEARCH_QUERY_LENGTH = 100


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------


def _get_suggestion_service(request: Request) -> SuggestionService:
    svc = getattr(request.app.state, "suggestion_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Search service unavailable")
    return svc


def _get_config(request: Request) -> dict[str, Any]:
    return getattr(request.app.state, "config", None) or {}


SuggestionServiceDep = Annotated[SuggestionService, Depends(_get_suggestion_service)]
ConfigDep = Annotated[dict[str, Any], Depends(_get_config)]


# ---------------------------------------------------------------------------
# Search endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/search/suggestions",
    response_model=SuggestionsResponse,
    response_model_by_alias=True,
    response_model_exclude_unset=True,
    summary="Type-ahead event suggestions",
)
async def search_suggestions(
    service: SuggestionServiceDep,
    q: Annotated[str, Query(description="Raw search box contents.")] = "",
    locale: Annotated[str | None, Query(description="Visitor UI locale.")] = None,
) -> SuggestionsResponse:
    """Return up to six matching events for the dropdown.

    Queries shorter than two characters (after trimming) return an empty
    list.  Store or expansion failures also return 200 with whatever could
    be produced; this endpoint never surfaces a 5xx for collaborator faults.
    """
    result = await service.suggest(q, locale=locale)
    return SuggestionsResponse.from_result(result.suggestions, result.expanded_terms)


@router.get(
    "/search/popular",
    response_model=PopularSearchesResponse,
    summary="Popular search terms",
)
async def popular_searches(config: ConfigDep) -> PopularSearchesResponse:
    """Return the curated popular-search list."""
    queries = config.get("search", {}).get("popular") or DEFAULT_POPULAR_SEARCHES
    return PopularSearchesResponse(queries=list(queries))


@router.get(
    "/search/{query}",
    response_model=SearchResultsResponse,
    response_model_by_alias=True,
    response_model_exclude_unset=True,
    responses={404: {"model": ErrorResponse}},
    summary="Full search results page",
)
async def search_results(
    query: str,
    request: Request,
    service: SuggestionServiceDep,
    locale: Annotated[str | None, Query(description="Visitor UI locale.")] = None,
) -> SearchResultsResponse:
    """Return all matching events split into upcoming / happening / past.

    *query* is a URL slug; hyphens decode to spaces.  A blank query or one
    longer than the configured maximum is a 404.
    """
    decoded = from_search_slug(query)
    max_length = getattr(
        request.app.state, "max_search_query_length", _DEFAULT_MAX_SEARCH_QUERY_LENGTH
    )
    if not decoded or len(decoded) > max_length:
        _logger.debug("search_rejected", length=len(decoded))
        raise HTTPException(status_code=404, detail="Search not found")

    results = await service.search(decoded, locale=locale)
    fields: dict[str, Any] = {
        "query": results.query,
        "slug": to_search_slug(results.query),
        "total": results.buckets.total,
        "upcoming": results.buckets.upcoming,
        "happening": results.buckets.happening,
        "past": results.buckets.past,
    }
    terms = visible_terms(results.expanded_terms)
    if terms is not None:
        fields["expanded_terms"] = terms
    return SearchResultsResponse(**fields)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability.

    ``healthy`` needs both the event store and a language model;
    without a model search still works (unexpanded) and reports
    ``degraded``.
    """
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    cache = getattr(request.app.state, "cache", None)
    if cache is not None and hasattr(cache, "stats"):
        providers["cache_stats"] = cache.stats()

    store_ok = providers.get("event_store", False)
    llm_ok = providers.get("llm", False)

    if store_ok and llm_ok:
        status = "healthy"
    elif store_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(status=status, version=_VERSION, providers=providers)


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List configured providers",
)
async def list_providers(request: Request) -> ProvidersResponse:
    """List all configured providers, their types, and availability status."""
    providers: list[dict[str, Any]] = []
    if hasattr(request.app.state, "provider_list"):
        providers = request.app.state.provider_list

    return ProvidersResponse(providers=providers)
