"""Integration tests for the search API using TestClient."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from eventsearch.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from eventsearch.api.routes import router as api_router
from eventsearch.interfaces.event_store import IEventStore
from eventsearch.interfaces.llm_provider import ILLMProvider
from eventsearch.providers.cache.memory_cache import MemoryCacheProvider
from eventsearch.providers.event_store.memory_store import MemoryEventStore
from eventsearch.services.query_expander import QueryExpander
from eventsearch.services.suggestion_service import SuggestionService
from eventsearch.utils.errors import ConfigurationError, ProviderUnavailableError
from factories import NOW, make_event


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _llm(response: str = "[]") -> MagicMock:
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value=response)
    return llm


def _catalogue() -> MemoryEventStore:
    return MemoryEventStore(
        [
            make_event(
                "yoga",
                "Sunrise Yoga",
                starts_at=NOW + timedelta(days=2),
                ends_at=NOW + timedelta(days=2, hours=1),
                location_name="Tuyen Lam Lake",
            ),
            make_event(
                "caphe",
                "Cà phê acoustic night",
                starts_at=NOW - timedelta(hours=1),
                ends_at=NOW + timedelta(hours=2),
                image_url="https://img.example.com/caphe.jpg",
            ),
            make_event(
                "cupping",
                "Coffee cupping",
                starts_at=NOW - timedelta(days=30),
                ends_at=NOW - timedelta(days=30) + timedelta(hours=3),
            ),
        ]
    )


def _create_test_app(
    llm: MagicMock | None = None,
    store: IEventStore | None = None,
    **state,
) -> FastAPI:
    """Create a FastAPI app wired like ``_build_all`` but with test doubles."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)

    cache = MemoryCacheProvider()
    expander = QueryExpander(llm, cache)
    app.state.cache = cache
    app.state.suggestion_service = SuggestionService(
        expander, store if store is not None else _catalogue(), clock=lambda: NOW
    )
    app.state.config = {"search": {"popular": ["yoga", "coffee"]}}
    app.state.max_search_query_length = 100
    app.state.provider_registry = {"event_store": True, "llm": llm is not None, "cache": True}
    app.state.provider_list = [{"name": "memory", "type": "event_store", "available": True}]
    for key, value in state.items():
        setattr(app.state, key, value)
    return app


# ---------------------------------------------------------------------------
# GET /search/suggestions
# ---------------------------------------------------------------------------


class TestSuggestionsEndpoint:
    def test_unexpanded_query_omits_expanded_terms(self) -> None:
        client = TestClient(_create_test_app(_llm("[]")))

        response = client.get("/search/suggestions", params={"q": "sunrise"})

        assert response.status_code == 200
        body = response.json()
        assert "expandedTerms" not in body
        assert len(body["suggestions"]) == 1
        suggestion = body["suggestions"][0]
        assert suggestion["title"] == "Sunrise Yoga"
        assert suggestion["lifecycle"] == "upcoming"
        assert suggestion["location"] == "Tuyen Lam Lake"
        assert suggestion["imageUrl"] is None
        assert suggestion["slug"] == "event-yoga"
        assert "startsAt" in suggestion

    def test_expanded_query_reports_terms(self) -> None:
        client = TestClient(_create_test_app(_llm('["coffee", "cà phê"]')))

        response = client.get("/search/suggestions", params={"q": "coffe"})

        body = response.json()
        assert body["expandedTerms"] == ["coffe", "coffee", "cà phê"]
        titles = [s["title"] for s in body["suggestions"]]
        # Newest start first.
        assert titles == ["Cà phê acoustic night", "Coffee cupping"]
        assert body["suggestions"][0]["lifecycle"] == "happening"
        assert body["suggestions"][1]["lifecycle"] == "past"

    @pytest.mark.parametrize("q", ["", "a", "  b  "])
    def test_short_query_returns_empty_list(self, q: str) -> None:
        llm = _llm('["x"]')
        client = TestClient(_create_test_app(llm))

        response = client.get("/search/suggestions", params={"q": q})

        assert response.status_code == 200
        assert response.json() == {"suggestions": []}
        llm.complete.assert_not_called()

    def test_missing_q_is_empty(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        assert client.get("/search/suggestions").json() == {"suggestions": []}

    def test_store_failure_is_200_with_empty_suggestions(self) -> None:
        store = MagicMock(spec=IEventStore)
        store.search_published = AsyncMock(
            side_effect=ProviderUnavailableError("timed out", provider_name="supabase")
        )
        client = TestClient(_create_test_app(_llm('["coffee"]'), store))

        response = client.get("/search/suggestions", params={"q": "coffe"})

        assert response.status_code == 200
        assert response.json() == {"suggestions": [], "expandedTerms": ["coffe", "coffee"]}

    def test_llm_failure_still_searches_original(self) -> None:
        llm = MagicMock(spec=ILLMProvider)
        llm.complete = AsyncMock(side_effect=RuntimeError("boom"))
        client = TestClient(_create_test_app(llm))

        body = client.get("/search/suggestions", params={"q": "yoga"}).json()

        assert [s["id"] for s in body["suggestions"]] == ["yoga"]
        assert "expandedTerms" not in body

    def test_no_llm_configured(self) -> None:
        client = TestClient(_create_test_app(None))
        body = client.get("/search/suggestions", params={"q": "coffee"}).json()
        assert [s["id"] for s in body["suggestions"]] == ["cupping"]

    def test_locale_is_forwarded_to_prompt(self) -> None:
        llm = _llm()
        client = TestClient(_create_test_app(llm))

        client.get("/search/suggestions", params={"q": "music", "locale": "vi"})

        assert "browsing in Vietnamese" in llm.complete.call_args.kwargs["user_prompt"]

    def test_request_id_header(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        response = client.get(
            "/search/suggestions", params={"q": "yoga"}, headers={"X-Request-ID": "abc123"}
        )
        assert response.headers["X-Request-ID"] == "abc123"


# ---------------------------------------------------------------------------
# GET /search/popular and /search/{query}
# ---------------------------------------------------------------------------


class TestSearchPages:
    def test_popular(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        assert client.get("/search/popular").json() == {"queries": ["yoga", "coffee"]}

    def test_full_search_buckets(self) -> None:
        client = TestClient(_create_test_app(_llm('["coffee", "cà phê", "yoga"]')))

        response = client.get("/search/coffe")

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "coffe"
        assert body["slug"] == "coffe"
        assert body["total"] == 3
        assert [s["id"] for s in body["upcoming"]] == ["yoga"]
        assert [s["id"] for s in body["happening"]] == ["caphe"]
        assert [s["id"] for s in body["past"]] == ["cupping"]
        assert body["expandedTerms"] == ["coffe", "coffee", "cà phê", "yoga"]

    def test_slug_hyphens_become_spaces(self) -> None:
        client = TestClient(_create_test_app(_llm()))

        body = client.get("/search/sunrise-yoga").json()

        assert body["query"] == "sunrise yoga"
        assert body["slug"] == "sunrise-yoga"
        assert [s["id"] for s in body["upcoming"]] == ["yoga"]
        assert "expandedTerms" not in body

    def test_percent_encoded_slug_is_decoded_once(self) -> None:
        client = TestClient(_create_test_app(_llm()))

        body = client.get("/search/c%C3%A0-ph%C3%AA-%2541").json()

        assert body["query"] == "cà phê %41"

    def test_blank_slug_is_404(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        assert client.get("/search/---").status_code == 404

    def test_overlong_query_is_404(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        assert client.get("/search/" + "a" * 101).status_code == 404

    def test_query_at_limit_is_allowed(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        assert client.get("/search/" + "a" * 100).status_code == 200


# ---------------------------------------------------------------------------
# System endpoints and error handling
# ---------------------------------------------------------------------------


class TestSystemEndpoints:
    def test_health_healthy(self) -> None:
        client = TestClient(_create_test_app(_llm()))

        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["version"] == "0.1.0"
        assert body["providers"]["cache_stats"]["entries"] == 0

    def test_health_degraded_without_llm(self) -> None:
        client = TestClient(_create_test_app(None))
        assert client.get("/health").json()["status"] == "degraded"

    def test_health_unhealthy_without_store(self) -> None:
        app = _create_test_app(
            _llm(), provider_registry={"event_store": False, "llm": True, "cache": True}
        )
        assert TestClient(app).get("/health").json()["status"] == "unhealthy"

    def test_providers(self) -> None:
        client = TestClient(_create_test_app(_llm()))
        body = client.get("/providers").json()
        assert body["providers"][0]["type"] == "event_store"

    def test_missing_service_is_503(self) -> None:
        app = FastAPI()
        app.include_router(api_router)
        response = TestClient(app).get("/search/suggestions", params={"q": "yoga"})
        assert response.status_code == 503

    def test_escaping_application_error_becomes_json_500(self) -> None:
        service = MagicMock(spec=SuggestionService)
        service.suggest = AsyncMock(side_effect=ConfigurationError("fixture unreadable"))
        app = _create_test_app(_llm(), suggestion_service=service)

        response = TestClient(app).get("/search/suggestions", params={"q": "yoga"})

        assert response.status_code == 500
        assert response.json() == {"error": "ConfigurationError", "detail": "fixture unreadable"}
