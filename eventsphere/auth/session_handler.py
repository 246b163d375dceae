"""Cookie-backed login sessions.

The session itself lives server-side in the store; the cookie carries a
signed token whose ``sid`` claim names it. Logging out deletes the row, so a
copied cookie stops working even before its ``exp``.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from eventsphere.auth.passwords import verify_password
from eventsphere.core import config
from eventsphere.core.errors import AuthenticationError
from eventsphere.database import utcnow
from eventsphere.models.user import User, UserRole
from eventsphere.storage import Storage

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid username or password'


@dataclass(frozen=True)
class AuthContext:
    session_id: str
    user_id: int
    username: str
    role: UserRole

    @property
    def is_event_manager(self) -> bool:
        return self.role == UserRole.EVENT_MANAGER


def create_session_token(session_id: str, expires_at: datetime) -> str:
    payload = {
        "sid": session_id,
        "exp": expires_at.replace(tzinfo=timezone.utc),
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, config.SESSION_SECRET_KEY, algorithm=config.SESSION_ALGORITHM)


def decode_session_token(token: str) -> dict:
    return jwt.decode(token, config.SESSION_SECRET_KEY, algorithms=[config.SESSION_ALGORITHM])


class SessionManager:
    def __init__(self, storage: Storage, ttl: timedelta | None = None):
        self.storage = storage
        self.ttl = ttl or timedelta(hours=config.SESSION_TTL_HOURS)

    def login(self, username: str, password: str) -> tuple[User, str]:
        """Check credentials and open a session; returns the user and the cookie token."""
        user = self.storage.get_user_by_username(username)
        if user is None or not verify_password(user.password_hash, password):
            logger.warning('Failed login for username %r', username)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        session_id = secrets.token_urlsafe(32)
        expires_at = utcnow() + self.ttl
        self.storage.create_session(session_id, user.id, expires_at)
        logger.info('User %s logged in', user.id)
        return user, create_session_token(session_id, expires_at)

    def logout(self, token: str | None) -> None:
        if not token:
            return
        try:
            payload = decode_session_token(token)
        except jwt.PyJWTError:
            return
        session_id = payload.get('sid')
        if session_id and self.storage.delete_session(session_id):
            logger.info('Session closed')

    def current_session(self, token: str | None) -> tuple[AuthContext, User]:
        if not token:
            raise AuthenticationError('Not authenticated')
        try:
            payload = decode_session_token(token)
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError('Session expired') from exc
        except jwt.PyJWTError as exc:
            raise AuthenticationError('Not authenticated') from exc

        session_id = payload.get('sid')
        user_session = self.storage.get_session(session_id) if session_id else None
        if user_session is None:
            raise AuthenticationError('Not authenticated')
        if user_session.expires_at <= utcnow():
            self.storage.delete_session(session_id)
            raise AuthenticationError('Session expired')

        user = self.storage.get_user(user_session.user_id)
        if user is None:
            self.storage.delete_session(session_id)
            raise AuthenticationError('Not authenticated')

        context = AuthContext(
            session_id=session_id,
            user_id=user.id,
            username=user.username,
            role=UserRole(user.role),
        )
        return context, user

    def purge_expired(self) -> int:
        removed = self.storage.delete_expired_sessions(utcnow())
        if removed:
            logger.info('Purged %s expired sessions', removed)
        return removed
