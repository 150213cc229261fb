"""
User entity models.

Users authenticate with email and password; the password column only ever
holds a bcrypt hash.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserRole(str, Enum):
    """Access level of a user."""

    ADMIN = "admin"
    USER = "user"
    READONLY = "readonly"


class UserBase(Base):
    """Base fields for user entity."""

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(default=UserRole.USER.value, max_length=16)
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


class User(UserBase, table=True):
    """Entity for dashboard users.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    password: str = Field(max_length=255, description="bcrypt hash")

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
