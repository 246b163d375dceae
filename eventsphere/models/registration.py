"""Registration model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Integer
from eventsphere.database import Base, utcnow


class Registration(Base):
    """Links a user to an event they intend to attend."""
    __tablename__ = "registrations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    event_id = Column(Integer, nullable=False, index=True)
    registration_date = Column(DateTime, nullable=False, default=utcnow)
    has_paid = Column(Boolean, nullable=False, default=False)
    has_attended = Column(Boolean, nullable=False, default=False)
