"""eventsearch application entry point.

Wires providers and services together and exposes the FastAPI ``app``.

Startup order:

  1. ``Settings()`` reads env / ``.env``; ``load_config`` merges the YAML.
  2. ``configure_logging`` picks the console or JSON renderer.
  3. ``_lifespan`` calls ``_build_all`` and copies every component onto
     ``app.state``, where the route dependencies find them.
  4. On shutdown the shared ``httpx.AsyncClient`` is closed.

Run locally with ``python -m eventsearch.main`` or
``uvicorn eventsearch.main:app --reload``.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from eventsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from eventsearch.api.routes import router as api_router
from eventsearch.config.loader import DEFAULT_LOCALES, load_config
from eventsearch.config.settings import Settings
from eventsearch.interfaces.event_store import IEventStore
from eventsearch.interfaces.llm_provider import ILLMProvider
from eventsearch.providers.cache.memory_cache import MemoryCacheProvider
from eventsearch.providers.event_store.memory_store import MemoryEventStore
from eventsearch.providers.event_store.supabase_provider import SupabaseEventStore
from eventsearch.providers.llm.anthropic_provider import AnthropicLLMProvider
from eventsearch.providers.llm.ollama_provider import OllamaLLMProvider
from eventsearch.providers.llm.openai_provider import OpenAILLMProvider
from eventsearch.services.query_expander import QueryExpander
from eventsearch.services.suggestion_service import SuggestionService
from eventsearch.utils.pattern_filter import SEARCH_FIELDS
from eventsearch.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the first configured LLM provider.

    Priority order: Anthropic -> OpenAI -> Ollama (only when enabled).
    Returns ``None`` when nothing is configured; expansion then degrades
    to the identity term set.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.ollama_enabled:
        return OllamaLLMProvider(settings=app_settings)
    return None


def _build_event_store(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    search_fields: Sequence[str] = SEARCH_FIELDS,
) -> IEventStore:
    """Use Supabase when a URL is configured, else the local fixture file."""
    if app_settings.supabase_url:
        return SupabaseEventStore(
            http_client=http_client, settings=app_settings, search_fields=search_fields
        )
    return MemoryEventStore.from_json_file(
        app_settings.events_fixture_path, search_fields=search_fields
    )


# ---------------------------------------------------------------------------
# Dependency assembly
# ---------------------------------------------------------------------------


def _build_all(
    app_settings: Settings,
    app_config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = app_config if app_config is not None else config
    site = app_config.get("site", {})
    search_fields = app_config.get("search", {}).get("fields") or SEARCH_FIELDS

    # -- Shared resources --
    # One pooled client for the whole process; the store reuses its
    # connections across requests.
    http_client = httpx.AsyncClient(timeout=app_settings.store_timeout_seconds)

    # -- Providers --
    llm = _build_llm_provider(app_settings)
    store = _build_event_store(app_settings, http_client, search_fields)
    # Sized for one worker; each uvicorn worker keeps its own copy.
    cache = MemoryCacheProvider(
        max_size=app_settings.expansion_cache_max_size,
        ttl=app_settings.expansion_cache_ttl_seconds,
    )

    # -- Services --
    expander = QueryExpander(
        llm=llm,
        cache=cache,
        locales=site.get("locales") or DEFAULT_LOCALES,
        city=site.get("city", "Da Lat, Vietnam"),
        timeout_seconds=app_settings.expansion_timeout_seconds,
        max_terms=app_settings.expansion_max_terms,
        cache_ttl=app_settings.expansion_cache_ttl_seconds,
        max_query_length=app_settings.max_expansion_query_length,
    )
    suggestion_service = SuggestionService(
        expander=expander,
        store=store,
        suggestion_limit=app_settings.suggestion_limit,
        search_limit=app_settings.search_result_limit,
    )

    # -- Provider metadata for /health and /providers --
    llm_available = llm is not None and llm.is_available()
    provider_list: list[dict[str, Any]] = [
        {
            "name": store.get_provider_name(),
            "type": "event_store",
            "available": store.is_available(),
        },
        {
            "name": llm.get_provider_name() if llm is not None else "none",
            "type": "llm",
            "available": llm_available,
        },
        {"name": "memory", "type": "cache", "available": True},
    ]
    provider_registry: dict[str, Any] = {
        "event_store": store.is_available(),
        "llm": llm_available,
        "cache": True,
    }

    return {
        "http_client": http_client,
        "config": app_config,
        "llm": llm,
        "event_store": store,
        "cache": cache,
        "query_expander": expander,
        "suggestion_service": suggestion_service,
        "max_search_query_length": app_settings.max_search_query_length,
        "provider_list": provider_list,
        "provider_registry": provider_registry,
        "primary_llm_name": llm.get_provider_name() if llm is not None else "none",
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    # Route dependencies read these by name from app.state.
    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=settings.app_env,
        primary_llm=components["primary_llm_name"],
        event_store=components["event_store"].get_provider_name(),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="eventsearch API",
        version="0.1.0",
        description=(
            "Type-ahead and full-page search over published events, with "
            "LLM query expansion across the site's content locales."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.get_cors_origins())

    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "eventsearch.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
