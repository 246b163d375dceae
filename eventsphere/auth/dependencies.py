from fastapi import Depends, Request

from eventsphere.auth.session_handler import AuthContext, SessionManager
from eventsphere.core import config
from eventsphere.core.errors import AuthenticationError, ForbiddenError
from eventsphere.services.registration import EventLockRegistry
from eventsphere.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_event_locks(request: Request) -> EventLockRegistry:
    return request.app.state.event_locks


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(config.SESSION_COOKIE_NAME)


def get_current_session(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthContext:
    context, _user = sessions.current_session(token)
    return context


def get_optional_session(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> AuthContext | None:
    try:
        context, _user = sessions.current_session(token)
    except AuthenticationError:
        return None
    return context


def require_event_manager(
    session: AuthContext | None = Depends(get_optional_session),
) -> AuthContext:
    if session is None or not session.is_event_manager:
        raise ForbiddenError('Forbidden: Requires event manager role')
    return session
