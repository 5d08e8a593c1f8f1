"""Schemas for store creation and listings."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from rately.core.security import ADDRESS_MAX_LEN
from rately.schemas.base import CamelModel, normalize_email
from rately.schemas.common import StorePagination


class AdminStoreCreate(CamelModel):
    """Store created by an admin, optionally bound to a store_owner user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    address: str = Field(..., min_length=1, max_length=ADDRESS_MAX_LEN)
    owner_id: int | None = None

    @field_validator("name", "address", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, v: object) -> object:
        return normalize_email(v) if isinstance(v, str) else v


class StoreOut(CamelModel):
    id: int
    name: str
    email: str
    address: str
    owner_id: int | None = None
    average_rating: float
    total_ratings: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StoreResponse(CamelModel):
    message: str | None = None
    store: StoreOut


class AdminStoreItem(StoreOut):
    """Admin listing row; owner fields read 'N/A' for unowned stores."""

    owner_name: str
    owner_email: str


class AdminStoresListResponse(CamelModel):
    stores: list[AdminStoreItem]
    pagination: StorePagination


class UserStoreItem(CamelModel):
    """Store as seen by a normal user, with that user's own rating joined in."""

    id: int
    name: str
    address: str
    average_rating: float
    total_ratings: int
    user_rating: int | None = None


class UserStoresListResponse(CamelModel):
    stores: list[UserStoreItem]
    pagination: StorePagination


class UserStoreResponse(CamelModel):
    store: UserStoreItem
