"""Error taxonomy shared by the store, the services and the routes.

Every error reaches the client as ``{"message": ..., "kind": ...}`` so the
front end can branch on ``kind`` instead of parsing messages.
"""

from fastapi import status


class EventSphereError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_400_BAD_REQUEST
    kind = 'error'
    default_message = 'Request failed.'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'message': self.message, 'kind': self.kind}


class ValidationFailedError(EventSphereError):
    kind = 'validation'
    default_message = 'Invalid request.'


class DuplicateUserError(EventSphereError):
    kind = 'duplicate_user'
    default_message = 'Username already exists'


class NotFoundError(EventSphereError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = 'not_found'
    default_message = 'Not found'


class AuthenticationError(EventSphereError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = 'unauthenticated'
    default_message = 'Not authenticated'


class ForbiddenError(EventSphereError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = 'forbidden'
    default_message = 'Forbidden'


class DuplicateRegistrationError(EventSphereError):
    kind = 'duplicate_registration'
    default_message = 'Already registered for this event'


class CapacityReachedError(EventSphereError):
    kind = 'capacity_reached'
    default_message = 'Event capacity reached'


class PaymentRequiredError(EventSphereError):
    kind = 'payment_required'
    default_message = 'Payment required for this event'


class StoreUnavailableError(EventSphereError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = 'unavailable'
    default_message = 'Data store unavailable.'


# HTTPException status codes raised by FastAPI itself, mapped onto kinds.
STATUS_KINDS = {
    status.HTTP_400_BAD_REQUEST: 'validation',
    status.HTTP_401_UNAUTHORIZED: 'unauthenticated',
    status.HTTP_403_FORBIDDEN: 'forbidden',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'method_not_allowed',
    422: 'validation',
    status.HTTP_503_SERVICE_UNAVAILABLE: 'unavailable',
}


def kind_for_status(status_code: int) -> str:
    if status_code >= 500:
        return STATUS_KINDS.get(status_code, 'internal')
    return STATUS_KINDS.get(status_code, 'error')
