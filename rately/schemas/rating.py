"""Schemas for rating submission, a user's own ratings and the owner dashboard."""

from datetime import datetime
from typing import Any

from rately.schemas.base import CamelModel
from rately.schemas.common import RatingPagination


class RatingSubmitRequest(CamelModel):
    """
    Body for POST /stores/ratings.

    Both fields are optional at the schema level so the service can answer
    with its own messages for missing and out-of-range input.
    """

    store_id: int | None = None
    rating: Any = None


class UserRatingItem(CamelModel):
    id: int
    rating: int
    store_id: int
    store_name: str
    store_address: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserRatingsResponse(CamelModel):
    ratings: list[UserRatingItem]


class OwnerRatingItem(CamelModel):
    """One rating on the owner dashboard, with the rater's name and email."""

    id: int
    rating: int
    user_name: str
    user_email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OwnerDashboardStore(CamelModel):
    id: int
    name: str
    email: str
    address: str
    average_rating: float
    total_ratings: int
    rank: int
    distribution: dict[str, int]


class OwnerDashboardResponse(CamelModel):
    """store is null when the owner has not been assigned a store yet."""

    store: OwnerDashboardStore | None
    ratings: list[OwnerRatingItem]
    pagination: RatingPagination
