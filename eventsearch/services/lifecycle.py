"""Lifecycle classification, the single definition of "happening now".

    past       an end instant exists and is before now
    happening  start <= now and (no end, or end >= now)
    upcoming   otherwise

An event with no end instant stays ``happening`` indefinitely once it has
started.  Both boundaries are inclusive on the ``happening`` side: an event
is happening at exactly its start and at exactly its end.

Every place that needs a lifecycle (suggestions, bucketed search results)
calls :func:`classify`; nothing else compares event times to the clock.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from eventsearch.models.event import EventRecord, EventSuggestion, Lifecycle
from eventsearch.models.search import LifecycleBuckets


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def classify(
    now: datetime,
    starts_at: datetime,
    ends_at: datetime | None = None,
) -> Lifecycle:
    """Classify an event relative to *now*.

    Parameters
    ----------
    now:
        The reference instant (timezone-aware).
    starts_at:
        Event start (timezone-aware).
    ends_at:
        Event end, or ``None`` for open-ended events.

    Returns
    -------
    Lifecycle
    """
    if ends_at is not None and ends_at < now:
        return Lifecycle.PAST
    if starts_at <= now:
        return Lifecycle.HAPPENING
    return Lifecycle.UPCOMING


def to_suggestion(record: EventRecord, now: datetime) -> EventSuggestion:
    """Project *record* with its lifecycle as of *now*."""
    return EventSuggestion.from_record(
        record, classify(now, record.starts_at, record.ends_at)
    )


def categorize(events: Iterable[EventRecord], now: datetime) -> LifecycleBuckets:
    """Split *events* into lifecycle buckets.

    Upcoming events are sorted soonest first and past events most recent
    first; happening events keep their input order.
    """
    upcoming: list[EventSuggestion] = []
    happening: list[EventSuggestion] = []
    past: list[EventSuggestion] = []

    for record in events:
        suggestion = to_suggestion(record, now)
        if suggestion.lifecycle is Lifecycle.PAST:
            past.append(suggestion)
        elif suggestion.lifecycle is Lifecycle.HAPPENING:
            happening.append(suggestion)
        else:
            upcoming.append(suggestion)

    upcoming.sort(key=lambda s: s.starts_at)
    past.sort(key=lambda s: s.starts_at, reverse=True)

    return LifecycleBuckets(upcoming=upcoming, happening=happening, past=past)
