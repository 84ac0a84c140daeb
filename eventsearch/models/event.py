"""Pydantic v2 models for events as read from the event store.

``EventRecord`` is the boundary type: rows coming back from the store
(PostgREST JSON or the local fixture file) are validated and coerced into
it exactly once, in :meth:`EventRecord.from_row`.  Everything downstream
works with the strict type and never re-checks shapes.

``EventSuggestion`` is the read projection sent to the type-ahead UI.  It
serializes with camelCase keys (``imageUrl``, ``startsAt``) to match the
frontend contract.

All models are frozen (immutable).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Lifecycle(str, Enum):
    """Temporal state of an event relative to "now".

    Derived on every read by :func:`eventsearch.services.lifecycle.classify`;
    never stored.
    """

    UPCOMING = "upcoming"
    HAPPENING = "happening"
    PAST = "past"


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps from the store are UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventRecord(BaseModel):
    """A published event row, validated at the store boundary."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Primary key (UUID in the hosted store).")
    slug: str = Field(min_length=1, description="Routable slug: /events/{slug}.")
    title: str = Field(min_length=1)
    description: str | None = None
    location_name: str | None = Field(
        default=None, description="Free-text venue / location label."
    )
    image_url: str | None = None
    starts_at: datetime
    ends_at: datetime | None = None
    status: str = "published"

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("starts_at", "ends_at")
    @classmethod
    def _normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("description", "location_name", "image_url")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> EventRecord:
        """Validate one raw row from the store.

        Raises
        ------
        pydantic.ValidationError
            If required fields are missing or timestamps are unparseable.
        """
        return cls.model_validate(row)


class EventSuggestion(BaseModel):
    """One entry in the type-ahead dropdown."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    slug: str
    title: str
    location: str | None = None
    image_url: str | None = None
    starts_at: datetime
    lifecycle: Lifecycle

    @classmethod
    def from_record(cls, record: EventRecord, lifecycle: Lifecycle) -> EventSuggestion:
        return cls(
            id=record.id,
            slug=record.slug,
            title=record.title,
            location=record.location_name,
            image_url=record.image_url,
            starts_at=record.starts_at,
            lifecycle=lifecycle,
        )
