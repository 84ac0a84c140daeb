"""Unit tests for the Supabase and in-memory event stores."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from eventsearch.config.settings import Settings
from eventsearch.providers.event_store.memory_store import MemoryEventStore
from eventsearch.providers.event_store.supabase_provider import SupabaseEventStore
from eventsearch.utils.errors import ConfigurationError, EventStoreError, ProviderUnavailableError
from factories import NOW, make_event


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:
    defaults = {
        "supabase_url": "https://demo.supabase.co/",
        "supabase_anon_key": "anon-key",
        "supabase_events_table": "events",
        "store_timeout_seconds": 2.0,
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _row(event_id: str = "e1", **overrides) -> dict:
    row = {
        "id": event_id,
        "slug": f"event-{event_id}",
        "title": "Sunrise Yoga",
        "description": None,
        "location_name": "Tuyen Lam Lake",
        "image_url": None,
        "starts_at": "2026-11-08T23:00:00+00:00",
        "ends_at": None,
        "status": "published",
    }
    row.update(overrides)
    return row


def _store(handler, **settings_overrides) -> SupabaseEventStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseEventStore(http_client=client, settings=_settings(**settings_overrides))


# ======================================================================
# SupabaseEventStore
# ======================================================================


class TestSupabaseEventStore:
    @pytest.mark.asyncio
    async def test_builds_postgrest_query(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=[_row()])

        store = _store(handler)
        records = await store.search_published(["yoga", "50%", 'say "hi"'], limit=6)

        assert [r.id for r in records] == ["e1"]
        request = captured[0]
        assert request.url.path == "/rest/v1/events"
        params = parse_qs(urlsplit(str(request.url)).query)
        assert params["status"] == ["eq.published"]
        assert params["order"] == ["starts_at.desc"]
        assert params["limit"] == ["6"]
        or_filter = params["or"][0]
        assert or_filter.startswith("(") and or_filter.endswith(")")
        assert 'title.ilike."%yoga%"' in or_filter
        assert 'location_name.ilike."%50\\\\%%"' in or_filter
        assert 'title.ilike."%say \\"hi\\"%"' in or_filter
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_configured_search_fields(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=[])

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = SupabaseEventStore(http_client=client, settings=_settings(), search_fields=("title",))

        await store.search_published(["yoga"], limit=6)

        params = parse_qs(urlsplit(str(captured[0].url)).query)
        assert params["or"] == ['(title.ilike."%yoga%")']

    @pytest.mark.asyncio
    async def test_empty_terms_skip_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await _store(handler).search_published([], limit=6) == []

    @pytest.mark.asyncio
    async def test_zero_limit_skips_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await _store(handler).search_published(["yoga"], limit=0) == []

    @pytest.mark.asyncio
    async def test_http_error_status_raises(self) -> None:
        store = _store(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(EventStoreError) as exc_info:
            await store.search_published(["yoga"], limit=6)
        assert exc_info.value.provider_name == "supabase"

    @pytest.mark.asyncio
    async def test_timeout_raises_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ProviderUnavailableError):
            await _store(handler).search_published(["yoga"], limit=6)

    @pytest.mark.asyncio
    async def test_connect_error_raises_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns", request=request)

        with pytest.raises(ProviderUnavailableError):
            await _store(handler).search_published(["yoga"], limit=6)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        store = _store(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(EventStoreError):
            await store.search_published(["yoga"], limit=6)

    @pytest.mark.asyncio
    async def test_non_array_body_raises(self) -> None:
        store = _store(lambda request: httpx.Response(200, json={"message": "nope"}))
        with pytest.raises(EventStoreError):
            await store.search_published(["yoga"], limit=6)

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self) -> None:
        rows = [_row("ok"), _row("bad", starts_at="soon"), "not-a-row", _row("ok2", id=7)]
        store = _store(lambda request: httpx.Response(200, json=rows))

        records = await store.search_published(["yoga"], limit=6)

        assert [r.id for r in records] == ["ok", "7"]

    def test_availability_needs_url_and_key(self) -> None:
        client = httpx.AsyncClient()
        assert SupabaseEventStore(client, _settings()).is_available() is True
        assert SupabaseEventStore(client, _settings(supabase_anon_key="")).is_available() is False
        assert SupabaseEventStore(client, _settings()).get_provider_name() == "supabase"


# ======================================================================
# MemoryEventStore
# ======================================================================


class TestMemoryEventStore:
    @pytest.mark.asyncio
    async def test_matches_any_field_any_term(self) -> None:
        store = MemoryEventStore(
            [
                make_event("a", "Jazz night", starts_at=NOW),
                make_event("b", "Workshop", starts_at=NOW, description="Watercolour basics"),
                make_event("c", "Meetup", starts_at=NOW, location_name="Jazz Bar"),
                make_event("d", "Hike", starts_at=NOW),
            ]
        )

        records = await store.search_published(["jazz", "WATERCOLOUR"], limit=10)

        assert {r.id for r in records} == {"a", "b", "c"}

    @pytest.mark.asyncio
    async def test_configured_search_fields(self) -> None:
        store = MemoryEventStore(
            [
                make_event("a", "Jazz night", starts_at=NOW),
                make_event("b", "Workshop", starts_at=NOW, description="Jazz basics"),
            ],
            search_fields=("title",),
        )

        records = await store.search_published(["jazz"], limit=10)

        assert [r.id for r in records] == ["a"]

    @pytest.mark.asyncio
    async def test_excludes_unpublished(self) -> None:
        store = MemoryEventStore(
            [make_event("a", "Jazz", starts_at=NOW, status="draft")]
        )
        assert await store.search_published(["jazz"], limit=10) == []

    @pytest.mark.asyncio
    async def test_orders_newest_first_and_limits(self) -> None:
        store = MemoryEventStore(
            [make_event(str(i), "Jazz", starts_at=NOW + timedelta(days=i)) for i in range(5)]
        )

        records = await store.search_published(["jazz"], limit=3)

        assert [r.id for r in records] == ["4", "3", "2"]

    @pytest.mark.asyncio
    async def test_percent_is_literal(self) -> None:
        store = MemoryEventStore(
            [
                make_event("a", "50% off tickets", starts_at=NOW),
                make_event("b", "500 seats", starts_at=NOW),
            ]
        )
        assert [r.id for r in await store.search_published(["50%"], limit=10)] == ["a"]

    def test_from_json_file(self, tmp_path: Path) -> None:
        fixture = tmp_path / "events.json"
        fixture.write_text(
            json.dumps([_row("one"), _row("two", title=""), _row("three")]),
            encoding="utf-8",
        )

        store = MemoryEventStore.from_json_file(fixture)

        assert len(store) == 2

    def test_missing_file_gives_empty_store(self, tmp_path: Path) -> None:
        assert len(MemoryEventStore.from_json_file(tmp_path / "missing.json")) == 0

    def test_non_array_file_raises(self, tmp_path: Path) -> None:
        fixture = tmp_path / "events.json"
        fixture.write_text('{"events": []}', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            MemoryEventStore.from_json_file(fixture)

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        fixture = tmp_path / "events.json"
        fixture.write_text("[{", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            MemoryEventStore.from_json_file(fixture)

    def test_bundled_fixture_loads(self, project_root: Path) -> None:
        store = MemoryEventStore.from_json_file(project_root / "data" / "events.json")
        assert len(store) == 6
