"""
Schema models for user and authentication API requests and responses.

The password hash never appears in a response schema.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ..entities.users import UserRole
from .base import CamelModel

_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"\d")


def check_password_policy(password: str) -> str:
    """Validate a plain-text password against the password policy.

    Raises:
        ValueError: If the password is not 8..100 characters long or lacks
            a letter or a digit
    """
    if not 8 <= len(password) <= 100:
        raise ValueError("Password must be between 8 and 100 characters")
    if not _LETTER.search(password) or not _DIGIT.search(password):
        raise ValueError("Password must contain at least one letter and one number")
    return password


class UserRead(CamelModel):
    """Schema for reading a user."""

    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserCreate(CamelModel):
    """Schema for creating a user."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_policy(value)


class UserUpdate(CamelModel):
    """Schema for updating a user."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class PasswordChange(CamelModel):
    current_password: Optional[str] = None
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return check_password_policy(value)


class RegisterRequest(UserCreate):
    """Schema for self-registration."""

    pass


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    user: UserRead
    token: str
