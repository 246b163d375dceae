from fastapi import APIRouter, Depends

from eventsphere.auth.dependencies import get_current_session, get_storage
from eventsphere.auth.session_handler import AuthContext
from eventsphere.core.errors import NotFoundError
from eventsphere.schemas import NotificationResponse
from eventsphere.storage import Storage

router = APIRouter(tags=['notifications'])


@router.get('', response_model=list[NotificationResponse])
def list_notifications(
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    return storage.get_notifications_by_user(session.user_id)


@router.put('/{notification_id}/read', response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    session: AuthContext = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
):
    notification = storage.get_notification(notification_id)
    # Someone else's notification is reported exactly like a missing one.
    if notification is None or notification.user_id != session.user_id:
        raise NotFoundError('Notification not found')
    return storage.mark_notification_as_read(notification_id)
