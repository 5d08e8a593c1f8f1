"""Request/response schemas for auth endpoints."""

from pydantic import EmailStr, Field, field_validator

from rately.core.roles import Role
from rately.core.security import ADDRESS_MAX_LEN, EMAIL_MAX_LEN, NAME_MAX_LEN, NAME_MIN_LEN
from rately.schemas.base import CamelModel, check_password_policy, normalize_email
from rately.schemas.user import UserOut


class RegisterRequest(CamelModel):
    """Self-service sign up; the account is always a normal_user."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str
    address: str = Field(..., min_length=1, max_length=ADDRESS_MAX_LEN)

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


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class ProfileUpdateRequest(CamelModel):
    """Partial self-service profile update."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1, max_length=ADDRESS_MAX_LEN)

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class PasswordUpdateRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class CurrentUser(CamelModel):
    """Authenticated identity (id, email, role) passed to handlers."""

    id: int
    email: str
    role: Role


class AuthResponse(CamelModel):
    """Returned by register and login."""

    message: str
    token: str
    user: UserOut
