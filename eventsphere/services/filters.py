"""Filters over an already-fetched list of events.

``GET /api/events`` applies these server-side; they never touch the store.
"""

from datetime import datetime
from typing import Iterable

from eventsphere.database import utcnow
from eventsphere.models.event import Event

ALL = 'all'
UPCOMING = 'upcoming'
PAST = 'past'


def _value(member) -> str:
    return getattr(member, 'value', member)


def filter_by_search_term(events: Iterable[Event], term: str | None) -> list[Event]:
    if not term or not term.strip():
        return list(events)
    needle = term.strip().lower()
    return [
        event for event in events
        if needle in (event.title or '').lower()
        or needle in (event.description or '').lower()
        or needle in (event.location or '').lower()
    ]


def filter_by_category(events: Iterable[Event], category: str | None) -> list[Event]:
    if not category or category == ALL:
        return list(events)
    return [event for event in events if _value(event.category) == _value(category)]


def filter_by_type(events: Iterable[Event], event_type: str | None) -> list[Event]:
    if not event_type or event_type == ALL:
        return list(events)
    return [event for event in events if _value(event.type) == _value(event_type)]


def filter_by_date(events: Iterable[Event], when: str | None, now: datetime | None = None) -> list[Event]:
    if not when or when == ALL:
        return list(events)
    now = now or utcnow()
    if when == UPCOMING:
        return [event for event in events if event.event_date >= now]
    if when == PAST:
        return [event for event in events if event.event_date < now]
    raise ValueError(f'Unknown date filter: {when}')


def apply_event_filters(
    events: Iterable[Event],
    *,
    search: str | None = None,
    category: str | None = None,
    event_type: str | None = None,
    when: str | None = None,
    now: datetime | None = None,
) -> list[Event]:
    filtered = filter_by_search_term(events, search)
    filtered = filter_by_category(filtered, category)
    filtered = filter_by_type(filtered, event_type)
    filtered = filter_by_date(filtered, when, now)
    return sorted(filtered, key=lambda event: (event.event_date, event.id))
