from fastapi import APIRouter, Depends, status

from eventsphere.auth.dependencies import (
    get_current_session,
    get_event_locks,
    get_storage,
    require_event_manager,
)
from eventsphere.auth.session_handler import AuthContext
from eventsphere.core.errors import ForbiddenError
from eventsphere.schemas import (
    AttendanceRequest,
    CreateRegistrationRequest,
    MessageResponse,
    RegistrationResponse,
)
from eventsphere.services import registration as registration_service
from eventsphere.services.registration import EventLockRegistry, RegistrationRequest
from eventsphere.storage import Storage

router = APIRouter(tags=['registrations'])


@router.post('', response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def create_registration(
    data: CreateRegistrationRequest,
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
    locks: EventLockRegistry = Depends(get_event_locks),
):
    return registration_service.register(
        storage,
        locks,
        RegistrationRequest(user_id=session.user_id, event_id=data.event_id, has_paid=data.has_paid),
    )


@router.get('/user', response_model=list[RegistrationResponse])
def list_my_registrations(
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    return storage.get_registrations_by_user(session.user_id)


@router.get('/event/{event_id}', response_model=list[RegistrationResponse])
def list_event_registrations(
    event_id: int,
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    event = storage.get_event(event_id)
    is_organizer = event is not None and event.organizer_id == session.user_id
    if not is_organizer and not session.is_event_manager:
        raise ForbiddenError("You don't have permission to view these registrations")
    return storage.get_registrations_by_event(event_id)


@router.delete('/{registration_id}', response_model=MessageResponse)
def cancel_registration(
    registration_id: int,
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
    locks: EventLockRegistry = Depends(get_event_locks),
):
    registration_service.cancel_registration(storage, locks, registration_id, session.user_id)
    return {'message': 'Registration cancelled successfully'}


@router.put('/{registration_id}/attendance', response_model=RegistrationResponse)
def update_attendance(
    registration_id: int,
    data: AttendanceRequest,
    session: AuthContext = Depends(require_event_manager),
    storage: Storage = Depends(get_storage),
):
    return registration_service.mark_attendance(storage, registration_id, session.user_id, data.has_attended)
