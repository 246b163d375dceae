"""Event model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String
from eventsphere.database import Base


class EventCategory(str, enum.Enum):
    TECHNICAL = "technical"
    NON_TECHNICAL = "non_technical"


class EventType(str, enum.Enum):
    FREE = "free"
    PAID = "paid"


def _enum_values(members):
    return [member.value for member in members]


class Event(Base):
    """Represents a campus event open for registration."""
    __tablename__ = "events"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    location = Column(String, nullable=False)
    event_date = Column(DateTime, nullable=False, index=True)
    category = Column(Enum(EventCategory, native_enum=False, values_callable=_enum_values), nullable=False)
    type = Column(
        Enum(EventType, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=EventType.FREE,
    )
    price = Column(Integer, nullable=False, default=0)
    capacity = Column(Integer, nullable=False)
    banner_image = Column(String)
    organizer_id = Column(Integer, nullable=False, index=True)

    @property
    def is_paid(self) -> bool:
        return self.type == EventType.PAID
