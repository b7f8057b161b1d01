"""Pydantic schemas for user operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rolematrix.core.constants import (
    MAX_DEPARTMENT_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from rolematrix.modules.users.models import UserStatus


class UserBase(BaseModel):
    """Base schema for user data."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for adding a user."""

    role: str = "Operator"
    department: str = Field("IT", max_length=MAX_DEPARTMENT_LENGTH)


class UserUpdate(BaseModel):
    """Schema for editing user details. Role and password have their own endpoints."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr | None = None
    department: str | None = Field(None, max_length=MAX_DEPARTMENT_LENGTH)


class UserRoleUpdate(BaseModel):
    """Schema for changing a user's role."""

    role: str


class UserPasswordReset(BaseModel):
    """Schema for an administrator setting a new password."""

    new_password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    role: str
    department: str
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int


class UserStatsResponse(BaseModel):
    """Summary cards of the User Management tab."""

    total_users: int
    active_roles: int
    inactive_users: int
