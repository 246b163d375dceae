"""In-process data store for users, events, registrations and notifications.

The store is an explicitly constructed object: the app factory builds one,
calls ``init()`` and hands it to the routes through a dependency. With the
default ``sqlite://`` URL everything lives in memory and is gone on restart.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Any, Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventsphere.auth.passwords import hash_password
from eventsphere.core import config
from eventsphere.core.errors import DuplicateUserError
from eventsphere.database import Base, create_session_factory, create_store_engine, utcnow
from eventsphere.models.event import Event, EventType
from eventsphere.models.notification import Notification
from eventsphere.models.registration import Registration
from eventsphere.models.session import UserSession
from eventsphere.models.user import User, UserRole

logger = logging.getLogger(__name__)

USER_FIELDS = {
    'username', 'email', 'first_name', 'last_name', 'role',
    'department', 'bio', 'profile_image', 'company', 'years_of_experience',
}
EVENT_FIELDS = {
    'title', 'description', 'location', 'event_date', 'category',
    'type', 'price', 'capacity', 'banner_image', 'organizer_id',
}
REGISTRATION_FIELDS = {'user_id', 'event_id', 'has_paid', 'has_attended'}


def _pick(data: dict[str, Any], allowed: set[str]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key in allowed}


def _duplicate_user_error(exc: IntegrityError) -> DuplicateUserError:
    if 'username' in str(exc.orig).lower():
        return DuplicateUserError('Username already exists')
    return DuplicateUserError('Email already exists')


def _build_registration(data: dict[str, Any]) -> Registration:
    values = _pick(data, REGISTRATION_FIELDS)
    return Registration(
        user_id=values['user_id'],
        event_id=values['event_id'],
        has_paid=bool(values.get('has_paid', False)),
        has_attended=bool(values.get('has_attended', False)),
        registration_date=utcnow(),
    )


def _build_notification(data: dict[str, Any]) -> Notification:
    return Notification(
        user_id=data['user_id'],
        message=data['message'],
        event_id=data.get('event_id'),
        is_read=False,
        created_at=utcnow(),
    )


def normalize_event_pricing(values: dict[str, Any]) -> dict[str, Any]:
    """Free events cost nothing; an unset price on a paid event is 0."""
    event_type = values.get('type') or EventType.FREE
    values['type'] = EventType(event_type)
    if values['type'] == EventType.FREE:
        values['price'] = 0
    else:
        values['price'] = values.get('price') or 0
    return values


class Storage:
    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or config.DATABASE_URL
        self.engine = create_store_engine(self.database_url)
        self._session_factory = create_session_factory(self.engine)
        self._lock = RLock()

    def init(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info('Data store ready at %s', self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    # Users

    def get_user(self, user_id: int) -> User | None:
        with self.session() as db:
            return db.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        with self.session() as db:
            return db.scalars(select(User).where(User.username == username)).first()

    def get_user_by_email(self, email: str) -> User | None:
        with self.session() as db:
            return db.scalars(select(User).where(User.email == email)).first()

    def create_user(self, data: dict[str, Any]) -> User:
        values = _pick(data, USER_FIELDS)
        values['role'] = UserRole(values.get('role') or UserRole.STUDENT)
        user = User(password_hash=hash_password(data['password']), **values)
        try:
            with self.session() as db:
                db.add(user)
                db.flush()
        except IntegrityError as exc:
            raise _duplicate_user_error(exc) from exc
        return user

    def update_user(self, user_id: int, changes: dict[str, Any]) -> User | None:
        try:
            with self.session() as db:
                user = db.get(User, user_id)
                if user is None:
                    return None
                for key, value in _pick(changes, USER_FIELDS).items():
                    setattr(user, key, value)
                if changes.get('password'):
                    user.password_hash = hash_password(changes['password'])
                db.flush()
                return user
        except IntegrityError as exc:
            raise _duplicate_user_error(exc) from exc

    # Events

    def get_event(self, event_id: int) -> Event | None:
        with self.session() as db:
            return db.get(Event, event_id)

    def get_all_events(self) -> list[Event]:
        with self.session() as db:
            return list(db.scalars(select(Event).order_by(Event.event_date.asc(), Event.id.asc())))

    def get_events_by_category(self, category: str) -> list[Event]:
        with self.session() as db:
            return list(
                db.scalars(
                    select(Event)
                    .where(Event.category == category)
                    .order_by(Event.event_date.asc(), Event.id.asc())
                )
            )

    def get_events_by_organizer(self, organizer_id: int) -> list[Event]:
        with self.session() as db:
            return list(
                db.scalars(
                    select(Event)
                    .where(Event.organizer_id == organizer_id)
                    .order_by(Event.event_date.asc(), Event.id.asc())
                )
            )

    def create_event(self, data: dict[str, Any]) -> Event:
        values = normalize_event_pricing(_pick(data, EVENT_FIELDS))
        event = Event(**values)
        with self.session() as db:
            db.add(event)
            db.flush()
        return event

    def update_event(self, event_id: int, changes: dict[str, Any]) -> Event | None:
        with self.session() as db:
            event = db.get(Event, event_id)
            if event is None:
                return None
            merged = {'type': event.type, 'price': event.price}
            merged.update(_pick(changes, EVENT_FIELDS))
            for key, value in normalize_event_pricing(merged).items():
                setattr(event, key, value)
            return event

    def delete_event(self, event_id: int) -> bool:
        with self.session() as db:
            event = db.get(Event, event_id)
            if event is None:
                return False
            db.delete(event)
            return True

    # Registrations

    def get_registration(self, registration_id: int) -> Registration | None:
        with self.session() as db:
            return db.get(Registration, registration_id)

    def get_registration_by_user_and_event(self, user_id: int, event_id: int) -> Registration | None:
        with self.session() as db:
            return db.scalars(
                select(Registration).where(
                    Registration.user_id == user_id,
                    Registration.event_id == event_id,
                )
            ).first()

    def get_registrations_by_user(self, user_id: int) -> list[Registration]:
        with self.session() as db:
            return list(
                db.scalars(select(Registration).where(Registration.user_id == user_id).order_by(Registration.id))
            )

    def get_registrations_by_event(self, event_id: int) -> list[Registration]:
        with self.session() as db:
            return list(
                db.scalars(select(Registration).where(Registration.event_id == event_id).order_by(Registration.id))
            )

    def count_registrations_for_event(self, event_id: int) -> int:
        with self.session() as db:
            return db.scalar(
                select(func.count(Registration.id)).where(Registration.event_id == event_id)
            ) or 0

    def create_registration(self, data: dict[str, Any]) -> Registration:
        registration = _build_registration(data)
        with self.session() as db:
            db.add(registration)
            db.flush()
        return registration

    def create_registration_with_notification(
        self,
        registration_data: dict[str, Any],
        notification_data: dict[str, Any],
    ) -> tuple[Registration, Notification]:
        """Insert a registration and its notification in one transaction."""
        registration = _build_registration(registration_data)
        notification = _build_notification(notification_data)
        with self.session() as db:
            db.add(registration)
            db.add(notification)
            db.flush()
        return registration, notification

    def update_registration(self, registration_id: int, changes: dict[str, Any]) -> Registration | None:
        with self.session() as db:
            registration = db.get(Registration, registration_id)
            if registration is None:
                return None
            for key, value in _pick(changes, REGISTRATION_FIELDS).items():
                setattr(registration, key, value)
            return registration

    def delete_registration(self, registration_id: int) -> bool:
        with self.session() as db:
            registration = db.get(Registration, registration_id)
            if registration is None:
                return False
            db.delete(registration)
            return True

    def delete_registrations_for_event(self, event_id: int) -> int:
        with self.session() as db:
            registrations = db.scalars(select(Registration).where(Registration.event_id == event_id)).all()
            for registration in registrations:
                db.delete(registration)
            return len(registrations)

    # Notifications

    def get_notification(self, notification_id: int) -> Notification | None:
        with self.session() as db:
            return db.get(Notification, notification_id)

    def get_notifications_by_user(self, user_id: int) -> list[Notification]:
        with self.session() as db:
            return list(
                db.scalars(
                    select(Notification)
                    .where(Notification.user_id == user_id)
                    .order_by(Notification.created_at.desc(), Notification.id.desc())
                )
            )

    def create_notification(self, data: dict[str, Any]) -> Notification:
        notification = _build_notification(data)
        with self.session() as db:
            db.add(notification)
            db.flush()
        return notification

    def mark_notification_as_read(self, notification_id: int) -> Notification | None:
        with self.session() as db:
            notification = db.get(Notification, notification_id)
            if notification is None:
                return None
            notification.is_read = True
            return notification

    # Login sessions

    def create_session(self, session_id: str, user_id: int, expires_at: datetime) -> UserSession:
        user_session = UserSession(id=session_id, user_id=user_id, created_at=utcnow(), expires_at=expires_at)
        with self.session() as db:
            db.add(user_session)
        return user_session

    def get_session(self, session_id: str) -> UserSession | None:
        with self.session() as db:
            return db.get(UserSession, session_id)

    def delete_session(self, session_id: str) -> bool:
        with self.session() as db:
            user_session = db.get(UserSession, session_id)
            if user_session is None:
                return False
            db.delete(user_session)
            return True

    def delete_expired_sessions(self, now: datetime) -> int:
        with self.session() as db:
            expired = db.scalars(select(UserSession).where(UserSession.expires_at <= now)).all()
            for user_session in expired:
                db.delete(user_session)
            return len(expired)

    # Analytics

    def get_event_attendance_count(self, event_id: int) -> int:
        with self.session() as db:
            return db.scalar(
                select(func.count(Registration.id)).where(
                    Registration.event_id == event_id,
                    Registration.has_attended.is_(True),
                )
            ) or 0

    def get_user_attendance_count(self, user_id: int) -> int:
        with self.session() as db:
            return db.scalar(
                select(func.count(Registration.id)).where(
                    Registration.user_id == user_id,
                    Registration.has_attended.is_(True),
                )
            ) or 0

    def get_upcoming_events_count(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        with self.session() as db:
            return db.scalar(select(func.count(Event.id)).where(Event.event_date >= now)) or 0

    def get_registered_events_count(self, user_id: int) -> int:
        with self.session() as db:
            return db.scalar(
                select(func.count(Registration.id)).where(Registration.user_id == user_id)
            ) or 0
