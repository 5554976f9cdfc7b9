"""
User model for authentication.

Every login identity is a User row: admins (two tiers, see AdminRole) and the
paired login of each scheduled Candidate.
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum
from app.core.clock import utcnow
from app.core.database import Base


class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    CANDIDATE = "CANDIDATE"


class AdminRole(str, enum.Enum):
    """
    Admin tier, only set when user_type is ADMIN.

    - ADMIN: super-admin, may manage departments, stacks and admin accounts
    - USER: plain admin (interview panel member)
    """
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=True)  # bcrypt hash

    # Profile
    name = Column(String, nullable=True)
    image = Column(String, nullable=True)

    # Role
    user_type = Column(Enum(UserType), nullable=False, index=True)
    admin_role = Column(Enum(AdminRole), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN

    @property
    def is_super_admin(self) -> bool:
        return self.is_admin and self.admin_role == AdminRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', user_type={self.user_type.value})>"
