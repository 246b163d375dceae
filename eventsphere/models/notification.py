"""Notification model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from eventsphere.database import Base, utcnow


class Notification(Base):
    """A message shown to a single user."""
    __tablename__ = "notifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    message = Column(String, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    event_id = Column(Integer)
