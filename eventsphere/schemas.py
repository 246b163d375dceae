"""
schemas.py
Request and response bodies for the REST API.
JSON keys are camelCase on the wire; requests also accept snake_case.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from eventsphere.models.event import EventCategory, EventType
from eventsphere.models.user import UserRole

MAX_TEXT_LENGTH = 2000


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _required_text(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Field is required.')
    return normalized


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    local, _, domain = normalized.partition('@')
    if not local or '.' not in domain:
        raise ValueError('A valid email address is required.')
    return normalized


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# --- Auth / users ---

class LoginRequest(CamelModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        return value.strip()


class CreateUserRequest(CamelModel):
    username: str = Field(max_length=64)
    password: str = Field(min_length=6, max_length=128)
    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.STUDENT
    department: str | None = None
    bio: str | None = Field(default=None, max_length=MAX_TEXT_LENGTH)
    profile_image: str | None = None
    company: str | None = None
    years_of_experience: int | None = Field(default=None, ge=0)

    @field_validator('username', 'first_name', 'last_name')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return _required_text(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('department', 'bio', 'profile_image', 'company')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        return _optional_text(value)


class UpdateProfileRequest(CamelModel):
    email: str | None = None
    password: str | None = Field(default=None, min_length=6, max_length=128)
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    bio: str | None = Field(default=None, max_length=MAX_TEXT_LENGTH)
    profile_image: str | None = None
    company: str | None = None
    years_of_experience: int | None = Field(default=None, ge=0)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_email(value)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, value: str | None) -> str | None:
        return None if value is None else _required_text(value)

    def to_changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        # Names, email and password cannot be cleared.
        for key in ('email', 'password', 'first_name', 'last_name'):
            if changes.get(key) is None:
                changes.pop(key, None)
        return changes


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    department: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    company: str | None = None
    years_of_experience: int | None = None


# --- Events ---

class CreateEventRequest(CamelModel):
    title: str = Field(max_length=200)
    description: str = Field(max_length=MAX_TEXT_LENGTH)
    location: str = Field(max_length=200)
    event_date: datetime
    category: EventCategory
    type: EventType = EventType.FREE
    price: int | None = Field(default=None, ge=0)
    capacity: int = Field(gt=0)
    banner_image: str | None = None

    @field_validator('title', 'description', 'location')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return _required_text(value)

    @field_validator('event_date')
    @classmethod
    def validate_event_date(cls, value: datetime) -> datetime:
        return _naive_utc(value)

    @field_validator('banner_image')
    @classmethod
    def validate_banner_image(cls, value: str | None) -> str | None:
        return _optional_text(value)


class UpdateEventRequest(CamelModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=MAX_TEXT_LENGTH)
    location: str | None = Field(default=None, max_length=200)
    event_date: datetime | None = None
    category: EventCategory | None = None
    type: EventType | None = None
    price: int | None = Field(default=None, ge=0)
    capacity: int | None = Field(default=None, gt=0)
    banner_image: str | None = None

    @field_validator('title', 'description', 'location')
    @classmethod
    def validate_required_text(cls, value: str | None) -> str | None:
        return None if value is None else _required_text(value)

    @field_validator('event_date')
    @classmethod
    def validate_event_date(cls, value: datetime | None) -> datetime | None:
        return None if value is None else _naive_utc(value)

    def to_changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        nullable = {'banner_image', 'price'}
        return {key: value for key, value in changes.items() if value is not None or key in nullable}


class EventResponse(CamelModel):
    id: int
    title: str
    description: str
    location: str
    event_date: datetime
    category: EventCategory
    type: EventType
    price: int
    capacity: int
    banner_image: str | None = None
    organizer_id: int


# --- Registrations ---

class CreateRegistrationRequest(CamelModel):
    event_id: int
    has_paid: bool = False


class AttendanceRequest(CamelModel):
    has_attended: bool = True


class RegistrationResponse(CamelModel):
    id: int
    user_id: int
    event_id: int
    registration_date: datetime
    has_paid: bool
    has_attended: bool


# --- Notifications ---

class NotificationResponse(CamelModel):
    id: int
    user_id: int
    message: str
    is_read: bool
    created_at: datetime
    event_id: int | None = None


# --- Analytics ---

class UserAnalyticsResponse(CamelModel):
    registered_events: int
    attended_events: int
    upcoming_events: int


class EventAnalyticsResponse(CamelModel):
    total_registrations: int
    attendees: int
    capacity: int
    fill_rate: float


class MessageResponse(BaseModel):
    message: str
