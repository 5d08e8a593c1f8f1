"""Admin endpoints: platform stats, user management and store management."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from rately.api.deps import AdminUser, DbSession, Page
from rately.core.roles import Role
from rately.schemas.base import MessageResponse
from rately.schemas.store import AdminStoreCreate, AdminStoresListResponse, StoreOut, StoreResponse
from rately.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    DashboardStats,
    UserDetailResponse,
    UserOut,
    UserResponse,
    UsersListResponse,
)
from rately.services import stores as store_service
from rately.services import users as user_service

router = APIRouter()

SortBy = Annotated[str | None, Query(alias="sortBy")]
SortOrder = Annotated[str | None, Query(alias="sortOrder")]


@router.get("/dashboard/stats", response_model=DashboardStats)
def get_dashboard_stats(_admin: AdminUser, db: DbSession) -> DashboardStats:
    """Counts of users, stores and ratings."""
    return user_service.dashboard_stats(db)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: AdminUserCreate, _admin: AdminUser, db: DbSession) -> UserResponse:
    user = user_service.create_user(db, body)
    return UserResponse(message="User created successfully", user=UserOut.model_validate(user))


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: AdminUser,
    db: DbSession,
    page: Page,
    search: str | None = None,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
    sort_by: SortBy = None,
    sort_order: SortOrder = None,
) -> UsersListResponse:
    """
    List users. `search` matches name, email or address; otherwise the
    per-field filters apply. Sort by name, email, address, role or createdAt.
    """
    return user_service.list_users(
        db,
        search=search,
        name=name,
        email=email,
        address=address,
        role=role,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
    )


@router.get("/users/{user_id}", response_model=UserDetailResponse)
def get_user(user_id: int, _admin: AdminUser, db: DbSession) -> UserDetailResponse:
    """User details; store owners include a summary of their store."""
    return UserDetailResponse(user=user_service.get_user_detail(db, user_id))


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: AdminUserUpdate,
    _admin: AdminUser,
    db: DbSession,
) -> UserResponse:
    user = user_service.update_user(db, user_id, body)
    return UserResponse(message="User updated successfully", user=UserOut.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, _admin: AdminUser, db: DbSession) -> MessageResponse:
    """Deletes the user, their store (store owners) and all ratings they wrote."""
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


@router.post("/stores", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
def create_store(body: AdminStoreCreate, _admin: AdminUser, db: DbSession) -> StoreResponse:
    store = store_service.create_store(db, body)
    return StoreResponse(message="Store created successfully", store=StoreOut.model_validate(store))


@router.get("/stores", response_model=AdminStoresListResponse)
def list_stores(
    _admin: AdminUser,
    db: DbSession,
    page: Page,
    search: str | None = None,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort_by: SortBy = None,
    sort_order: SortOrder = None,
) -> AdminStoresListResponse:
    return store_service.list_stores_admin(
        db,
        search=search,
        name=name,
        email=email,
        address=address,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
    )


@router.delete("/stores/{store_id}", response_model=MessageResponse)
def delete_store(store_id: int, _admin: AdminUser, db: DbSession) -> MessageResponse:
    """Deletes the store and every rating that references it."""
    store_service.delete_store(db, store_id)
    return MessageResponse(message="Store deleted successfully")
