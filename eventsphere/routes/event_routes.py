import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from eventsphere.auth.dependencies import get_event_locks, get_storage, require_event_manager
from eventsphere.auth.session_handler import AuthContext
from eventsphere.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from eventsphere.models.event import Event, EventCategory, EventType
from eventsphere.schemas import CreateEventRequest, EventResponse, MessageResponse, UpdateEventRequest
from eventsphere.services.filters import apply_event_filters
from eventsphere.services.registration import EventLockRegistry
from eventsphere.storage import Storage

router = APIRouter(tags=['events'])

logger = logging.getLogger(__name__)


def get_event_or_404(storage: Storage, event_id: int) -> Event:
    event = storage.get_event(event_id)
    if event is None:
        raise NotFoundError('Event not found')
    return event


def ensure_organizer(event: Event, session: AuthContext, action: str) -> None:
    if event.organizer_id != session.user_id:
        raise ForbiddenError(f"You don't have permission to {action} this event")


@router.get('', response_model=list[EventResponse])
def list_events(
    search: str | None = Query(default=None, max_length=200),
    category: EventCategory | None = Query(default=None),
    event_type: EventType | None = Query(default=None, alias='type'),
    when: Literal['upcoming', 'past', 'all'] | None = Query(default=None),
    storage: Storage = Depends(get_storage),
):
    return apply_event_filters(
        storage.get_all_events(),
        search=search,
        category=category,
        event_type=event_type,
        when=when,
    )


@router.get('/category/{category}', response_model=list[EventResponse])
def list_events_by_category(category: EventCategory, storage: Storage = Depends(get_storage)):
    return storage.get_events_by_category(category)


@router.get('/organizer/{organizer_id}', response_model=list[EventResponse])
def list_events_by_organizer(organizer_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_events_by_organizer(organizer_id)


@router.get('/{event_id}', response_model=EventResponse)
def get_event(event_id: int, storage: Storage = Depends(get_storage)):
    return get_event_or_404(storage, event_id)


@router.post('', response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    data: CreateEventRequest,
    session: AuthContext = Depends(require_event_manager),
    storage: Storage = Depends(get_storage),
):
    event = storage.create_event({**data.model_dump(), 'organizer_id': session.user_id})
    logger.info('Event %s created by user %s', event.id, session.user_id)
    return event


@router.put('/{event_id}', response_model=EventResponse)
def update_event(
    event_id: int,
    data: UpdateEventRequest,
    session: AuthContext = Depends(require_event_manager),
    storage: Storage = Depends(get_storage),
    locks: EventLockRegistry = Depends(get_event_locks),
):
    event = get_event_or_404(storage, event_id)
    ensure_organizer(event, session, 'update')

    changes = data.to_changes()
    with locks.hold(event_id):
        new_capacity = changes.get('capacity')
        if new_capacity is not None:
            registered = storage.count_registrations_for_event(event_id)
            if new_capacity < registered:
                raise ValidationFailedError(
                    f'Capacity cannot be lower than the {registered} existing registrations.'
                )
        updated = storage.update_event(event_id, changes)

    if updated is None:
        raise NotFoundError('Event not found')
    return updated


@router.delete('/{event_id}', response_model=MessageResponse)
def delete_event(
    event_id: int,
    session: AuthContext = Depends(require_event_manager),
    storage: Storage = Depends(get_storage),
    locks: EventLockRegistry = Depends(get_event_locks),
):
    event = get_event_or_404(storage, event_id)
    ensure_organizer(event, session, 'delete')

    with locks.hold(event_id):
        removed_registrations = storage.delete_registrations_for_event(event_id)
        if not storage.delete_event(event_id):
            raise NotFoundError('Event not found')
    locks.discard(event_id)

    logger.info('Event %s deleted by user %s (%s registrations removed)', event_id, session.user_id, removed_registrations)
    return {'message': 'Event deleted successfully'}
