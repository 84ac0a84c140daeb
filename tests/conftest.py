"""Shared pytest fixtures for the eventsearch test suite."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from eventsearch.interfaces.llm_provider import ILLMProvider
from eventsearch.models.event import EventRecord
from eventsearch.providers.event_store.memory_store import MemoryEventStore
from factories import NOW, make_event


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_events() -> list[EventRecord]:
    """A small catalogue covering each lifecycle and a couple of languages."""
    return [
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
            description="Nhạc acoustic và cà phê",
            location_name="An Cafe",
        ),
        make_event(
            "cupping",
            "Coffee cupping",
            starts_at=NOW - timedelta(days=30),
            ends_at=NOW - timedelta(days=30) + timedelta(hours=3),
            location_name="Cau Dat Farm",
        ),
        make_event(
            "market",
            "Night market walk",
            starts_at=NOW - timedelta(days=3),
            description="Street food and strawberries",
        ),
        make_event(
            "draft",
            "Coffee roasting (draft)",
            starts_at=NOW + timedelta(days=10),
            status="draft",
        ),
    ]


@pytest.fixture
def memory_store(sample_events: list[EventRecord]) -> MemoryEventStore:
    return MemoryEventStore(sample_events)


@pytest.fixture
def mock_llm() -> MagicMock:
    """A language model stub whose ``complete`` returns an empty JSON array."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="[]")
    llm.get_provider_name.return_value = "mock"
    llm.is_available.return_value = True
    return llm
