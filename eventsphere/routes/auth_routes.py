import logging

from fastapi import APIRouter, Depends, Response

from eventsphere.auth.dependencies import get_session_manager, get_session_token
from eventsphere.auth.session_handler import SessionManager
from eventsphere.core import config
from eventsphere.schemas import LoginRequest, MessageResponse, UserResponse

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)


def set_session_cookie(response: Response, token: str, max_age_seconds: int) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=max_age_seconds,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
    )


@router.post('/login', response_model=UserResponse)
def login(
    data: LoginRequest,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.purge_expired()
    user, token = sessions.login(data.username, data.password)
    set_session_cookie(response, token, int(sessions.ttl.total_seconds()))
    return user


@router.post('/logout', response_model=MessageResponse)
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.logout(token)
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return {'message': 'Logged out successfully'}


@router.get('/session', response_model=UserResponse)
def current_session(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
):
    _context, user = sessions.current_session(token)
    return user
