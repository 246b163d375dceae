"""Server-side login session definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from eventsphere.database import Base, utcnow


class UserSession(Base):
    """A login session; the cookie only carries its id."""
    __tablename__ = "sessions"

    id = Column(String, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)
