import logging

from fastapi import APIRouter, Depends, status

from eventsphere.auth.dependencies import get_current_session, get_storage
from eventsphere.auth.session_handler import AuthContext
from eventsphere.core.errors import DuplicateUserError, NotFoundError
from eventsphere.schemas import CreateUserRequest, UpdateProfileRequest, UserResponse
from eventsphere.storage import Storage

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: CreateUserRequest, storage: Storage = Depends(get_storage)):
    if storage.get_user_by_username(data.username):
        raise DuplicateUserError('Username already exists')
    if storage.get_user_by_email(data.email):
        raise DuplicateUserError('Email already exists')

    user = storage.create_user(data.model_dump())
    logger.info('User %s created with role %s', user.id, user.role.value)
    return user


@router.put('/me', response_model=UserResponse)
def update_profile(
    data: UpdateProfileRequest,
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    changes = data.to_changes()
    email = changes.get('email')
    if email:
        existing = storage.get_user_by_email(email)
        if existing is not None and existing.id != session.user_id:
            raise DuplicateUserError('Email already exists')

    user = storage.update_user(session.user_id, changes)
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.get('/{user_id}', response_model=UserResponse, dependencies=[Depends(get_current_session)])
def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user
