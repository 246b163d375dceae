from datetime import datetime
from types import SimpleNamespace

import pytest

from eventsphere.models.event import EventCategory, EventType
from eventsphere.services.filters import (
    apply_event_filters,
    filter_by_category,
    filter_by_date,
    filter_by_search_term,
    filter_by_type,
)

NOW = datetime(2026, 5, 1, 12, 0)


def _event(event_id: int, title: str, **overrides):
    fields = {
        'id': event_id,
        'title': title,
        'description': 'A campus gathering',
        'location': 'Main Hall',
        'event_date': datetime(2026, 6, 1, 18, 0),
        'category': EventCategory.TECHNICAL,
        'type': EventType.FREE,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def events():
    return [
        _event(1, 'Intro to Rust', location='Lab 3'),
        _event(2, 'Poetry Slam', category=EventCategory.NON_TECHNICAL, type=EventType.PAID),
        _event(3, 'Hackathon Retro', description='Looking back at RUST projects', event_date=datetime(2026, 4, 1)),
    ]


def test_search_is_case_insensitive_across_fields(events) -> None:
    assert [event.id for event in filter_by_search_term(events, 'rust')] == [1, 3]
    assert [event.id for event in filter_by_search_term(events, 'LAB')] == [1]


def test_blank_search_returns_everything(events) -> None:
    assert len(filter_by_search_term(events, '   ')) == 3


def test_category_and_type_filters(events) -> None:
    assert [event.id for event in filter_by_category(events, 'non_technical')] == [2]
    assert [event.id for event in filter_by_type(events, EventType.PAID)] == [2]
    assert len(filter_by_category(events, 'all')) == 3


def test_date_filter_splits_on_now(events) -> None:
    assert [event.id for event in filter_by_date(events, 'upcoming', NOW)] == [1, 2]
    assert [event.id for event in filter_by_date(events, 'past', NOW)] == [3]


def test_event_starting_exactly_now_is_upcoming() -> None:
    starting_now = _event(4, 'Keynote', event_date=NOW)

    assert filter_by_date([starting_now], 'upcoming', NOW) == [starting_now]
    assert filter_by_date([starting_now], 'past', NOW) == []


def test_date_filter_rejects_unknown_window(events) -> None:
    with pytest.raises(ValueError):
        filter_by_date(events, 'tomorrow', NOW)


def test_apply_event_filters_composes_and_sorts(events) -> None:
    result = apply_event_filters(events, search='rust', category='technical', when='all', now=NOW)

    assert [event.id for event in result] == [3, 1]
