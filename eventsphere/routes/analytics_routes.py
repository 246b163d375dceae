from fastapi import APIRouter, Depends

from eventsphere.auth.dependencies import get_current_session, get_storage, require_event_manager
from eventsphere.auth.session_handler import AuthContext
from eventsphere.core.errors import ForbiddenError, NotFoundError
from eventsphere.schemas import EventAnalyticsResponse, UserAnalyticsResponse
from eventsphere.storage import Storage

router = APIRouter(tags=['analytics'])


def calculate_fill_rate(registrations: int, capacity: int) -> float:
    if capacity <= 0:
        return 0.0
    return registrations / capacity * 100


@router.get('/user', response_model=UserAnalyticsResponse)
def user_analytics(
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    return UserAnalyticsResponse(
        registered_events=storage.get_registered_events_count(session.user_id),
        attended_events=storage.get_user_attendance_count(session.user_id),
        upcoming_events=storage.get_upcoming_events_count(),
    )


@router.get('/event/{event_id}', response_model=EventAnalyticsResponse)
def event_analytics(
    event_id: int,
    session: AuthContext = Depends(require_event_manager),
    storage: Storage = Depends(get_storage),
):
    event = storage.get_event(event_id)
    if event is None:
        raise NotFoundError('Event not found')
    if event.organizer_id != session.user_id:
        raise ForbiddenError("You don't have permission to view these analytics")

    total_registrations = storage.count_registrations_for_event(event_id)
    return EventAnalyticsResponse(
        total_registrations=total_registrations,
        attendees=storage.get_event_attendance_count(event_id),
        capacity=event.capacity,
        fill_rate=calculate_fill_rate(total_registrations, event.capacity),
    )
