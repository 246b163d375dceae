"""User model definitions."""

import enum

from sqlalchemy import Column, Enum, Integer, String
from eventsphere.database import Base


class UserRole(str, enum.Enum):
    STUDENT = "student"
    EVENT_MANAGER = "event_manager"


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, native_enum=False, values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
        default=UserRole.STUDENT,
    )
    department = Column(String)
    bio = Column(String)
    profile_image = Column(String)
    company = Column(String)
    years_of_experience = Column(Integer)

    @property
    def is_event_manager(self) -> bool:
        return self.role == UserRole.EVENT_MANAGER
