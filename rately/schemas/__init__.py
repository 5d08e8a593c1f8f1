"""Pydantic request/response schemas."""

from rately.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from rately.schemas.base import CamelModel, MessageResponse
from rately.schemas.common import (
    Pagination,
    RatingPagination,
    StorePagination,
    UserPagination,
)
from rately.schemas.health import HealthResponse
from rately.schemas.rating import (
    OwnerDashboardResponse,
    OwnerDashboardStore,
    OwnerRatingItem,
    RatingSubmitRequest,
    UserRatingItem,
    UserRatingsResponse,
)
from rately.schemas.store import (
    AdminStoreCreate,
    AdminStoreItem,
    AdminStoresListResponse,
    StoreOut,
    StoreResponse,
    UserStoreItem,
    UserStoreResponse,
    UserStoresListResponse,
)
from rately.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    DashboardStats,
    OwnedStoreSummary,
    UserDetail,
    UserDetailResponse,
    UserOut,
    UserResponse,
    UsersListResponse,
)

__all__ = [
    "AdminStoreCreate",
    "AdminStoreItem",
    "AdminStoresListResponse",
    "AdminUserCreate",
    "AdminUserUpdate",
    "AuthResponse",
    "CamelModel",
    "CurrentUser",
    "DashboardStats",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "OwnedStoreSummary",
    "OwnerDashboardResponse",
    "OwnerDashboardStore",
    "OwnerRatingItem",
    "Pagination",
    "PasswordUpdateRequest",
    "ProfileUpdateRequest",
    "RatingPagination",
    "RatingSubmitRequest",
    "RegisterRequest",
    "StoreOut",
    "StorePagination",
    "StoreResponse",
    "UserDetail",
    "UserDetailResponse",
    "UserOut",
    "UserPagination",
    "UserRatingItem",
    "UserRatingsResponse",
    "UserResponse",
    "UserStoreItem",
    "UserStoreResponse",
    "UserStoresListResponse",
    "UsersListResponse",
]
