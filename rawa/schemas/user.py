"""Pydantic schemas for users: role/status vocabularies, projections and management requests."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Role hierarchy, highest first.
UserRole = Literal["SUPER_ADMIN", "ADMIN", "DATA_ENTRY", "FACTORY_OWNER", "EMPLOYEE", "USER"]

USER_ROLES: tuple[str, ...] = (
    "SUPER_ADMIN",
    "ADMIN",
    "DATA_ENTRY",
    "FACTORY_OWNER",
    "EMPLOYEE",
    "USER",
)

DEFAULT_ROLE: UserRole = "USER"

UserStatus = Literal["ACTIVE", "INACTIVE", "SUSPENDED"]


class UserOut(BaseModel):
    """Full user projection (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    phone: str | None = None
    role: UserRole
    email_verified: bool
    status: UserStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserPublic(BaseModel):
    """Restricted projection returned to callers without full view rights."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    phone: str | None = None


class UserCreateRequest(BaseModel):
    """Privileged user creation. role defaults to USER."""

    username: str = Field(..., min_length=3, max_length=191)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole | None = None


class UserUpdateRequest(BaseModel):
    """Partial update; role and password changes need extra rights."""

    username: str | None = Field(default=None, min_length=3, max_length=191)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=7, max_length=64)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    role: UserRole | None = None
    status: UserStatus | None = None


class UserResponse(BaseModel):
    user: UserOut


class UsersListResponse(BaseModel):
    users: list[UserOut]
