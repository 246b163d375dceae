"""Registration workflow: the checks that guard every new registration."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from typing import Iterator

from eventsphere.core.errors import (
    CapacityReachedError,
    DuplicateRegistrationError,
    ForbiddenError,
    NotFoundError,
    PaymentRequiredError,
)
from eventsphere.models.event import EventType
from eventsphere.models.registration import Registration
from eventsphere.storage import Storage

logger = logging.getLogger(__name__)


class EventLockRegistry:
    """One lock per event id; held across the check and the insert."""

    def __init__(self):
        self._guard = Lock()
        self._locks: dict[int, Lock] = {}

    def get(self, event_id: int) -> Lock:
        with self._guard:
            lock = self._locks.get(event_id)
            if lock is None:
                lock = self._locks[event_id] = Lock()
            return lock

    @contextmanager
    def hold(self, event_id: int) -> Iterator[None]:
        lock = self.get(event_id)
        with lock:
            yield

    def discard(self, event_id: int) -> None:
        with self._guard:
            self._locks.pop(event_id, None)


@dataclass
class RegistrationRequest:
    user_id: int
    event_id: int
    has_paid: bool = False


def confirmation_message(event_title: str) -> str:
    return f'You have successfully registered for {event_title}'


def register(storage: Storage, locks: EventLockRegistry, request: RegistrationRequest) -> Registration:
    """Register a user for an event.

    Checks run in a fixed order so a repeat attempt reports the duplicate
    rather than a full event: existence, duplicate, capacity, payment.
    """
    with locks.hold(request.event_id):
        event = storage.get_event(request.event_id)
        if event is None:
            raise NotFoundError('Event not found')

        existing = storage.get_registration_by_user_and_event(request.user_id, request.event_id)
        if existing is not None:
            logger.warning('User %s already registered for event %s', request.user_id, event.id)
            raise DuplicateRegistrationError()

        if storage.count_registrations_for_event(event.id) >= event.capacity:
            logger.warning('Event %s is full, rejecting user %s', event.id, request.user_id)
            raise CapacityReachedError()

        if event.type == EventType.PAID and not request.has_paid:
            raise PaymentRequiredError()

        registration, _notification = storage.create_registration_with_notification(
            {
                'user_id': request.user_id,
                'event_id': event.id,
                'has_paid': True if event.type == EventType.FREE else bool(request.has_paid),
                'has_attended': False,
            },
            {
                'user_id': request.user_id,
                'message': confirmation_message(event.title),
                'event_id': event.id,
            },
        )

    logger.info('Registration %s created for user %s on event %s', registration.id, request.user_id, event.id)
    return registration


def cancel_registration(
    storage: Storage,
    locks: EventLockRegistry,
    registration_id: int,
    user_id: int,
) -> None:
    registration = storage.get_registration(registration_id)
    if registration is None or registration.user_id != user_id:
        raise NotFoundError('Registration not found')

    with locks.hold(registration.event_id):
        storage.delete_registration(registration.id)

    logger.info('Registration %s cancelled by user %s', registration.id, user_id)


def mark_attendance(
    storage: Storage,
    registration_id: int,
    organizer_id: int,
    attended: bool = True,
) -> Registration:
    registration = storage.get_registration(registration_id)
    if registration is None:
        raise NotFoundError('Registration not found')

    event = storage.get_event(registration.event_id)
    if event is None:
        raise NotFoundError('Event not found')
    if event.organizer_id != organizer_id:
        raise ForbiddenError("You don't have permission to update attendance for this event")

    return storage.update_registration(registration.id, {'has_attended': attended})
