"""Schemas for user payloads and admin user management."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from rately.core.roles import Role
from rately.core.security import ADDRESS_MAX_LEN, NAME_MAX_LEN, NAME_MIN_LEN
from rately.schemas.base import CamelModel, check_password_policy, normalize_email
from rately.schemas.common import UserPagination


class UserOut(CamelModel):
    """User entry as exposed by the API (never includes the password hash)."""

    id: int
    name: str
    email: str
    address: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OwnedStoreSummary(CamelModel):
    """Store details attached to a store owner's admin view."""

    id: int
    name: str
    email: str
    address: str
    average_rating: float
    total_ratings: int


class UserDetail(UserOut):
    store: OwnedStoreSummary | None = None


class UserResponse(CamelModel):
    message: str | None = None
    user: UserOut


class UserDetailResponse(CamelModel):
    user: UserDetail


class UsersListResponse(CamelModel):
    users: list[UserOut]
    pagination: UserPagination


class AdminUserCreate(CamelModel):
    """Admin-created account; any role may be assigned."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str
    address: str = Field(..., min_length=1, max_length=ADDRESS_MAX_LEN)
    role: Role = Role.NORMAL_USER

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class AdminUserUpdate(CamelModel):
    """Partial update; omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1, max_length=ADDRESS_MAX_LEN)
    role: Role | None = None
    password: str | None = None

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str | None) -> str | None:
        return check_password_policy(v) if v is not None else None


class DashboardStats(CamelModel):
    """Platform-wide counts for the admin dashboard."""

    total_users: int
    total_stores: int
    total_ratings: int
