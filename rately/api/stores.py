"""Store browsing and rating for normal users; the dashboard for store owners."""

from typing import Annotated

from fastapi import APIRouter, Query

from rately.api.deps import DbSession, NormalUser, Page, StoreOwner
from rately.schemas.base import MessageResponse
from rately.schemas.rating import OwnerDashboardResponse, RatingSubmitRequest, UserRatingsResponse
from rately.schemas.store import UserStoreResponse, UserStoresListResponse
from rately.services import ratings as rating_service
from rately.services import stores as store_service

router = APIRouter()


@router.get("", response_model=UserStoresListResponse)
def list_stores(
    current_user: NormalUser,
    db: DbSession,
    page: Page,
    search: str | None = None,
    name: str | None = None,
    address: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
) -> UserStoresListResponse:
    """Stores with the caller's own rating joined in as `userRating` (null if unrated)."""
    return store_service.list_stores_for_user(
        db,
        current_user.id,
        search=search,
        name=name,
        address=address,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
    )


@router.post("/ratings", response_model=MessageResponse)
def submit_rating(
    body: RatingSubmitRequest,
    current_user: NormalUser,
    db: DbSession,
) -> MessageResponse:
    """Create or overwrite the caller's rating for a store (1-5)."""
    rating_service.submit_rating(db, current_user.id, body.store_id, body.rating)
    return MessageResponse(message="Rating submitted successfully")


@router.get("/user/ratings", response_model=UserRatingsResponse)
def list_my_ratings(current_user: NormalUser, db: DbSession) -> UserRatingsResponse:
    return UserRatingsResponse(ratings=rating_service.list_user_ratings(db, current_user.id))


@router.get("/owner/dashboard", response_model=OwnerDashboardResponse)
def owner_dashboard(
    current_user: StoreOwner,
    db: DbSession,
    page: Page,
    search: str | None = None,
) -> OwnerDashboardResponse:
    """
    The owner's store with cached stats, rank and rating distribution, plus
    paginated ratings filterable by rater name or email. Owners without a
    store get `store: null`.
    """
    return store_service.owner_dashboard(db, current_user.id, search=search, page=page)


@router.get("/{store_id}", response_model=UserStoreResponse)
def get_store(store_id: int, current_user: NormalUser, db: DbSession) -> UserStoreResponse:
    return UserStoreResponse(store=store_service.get_store_for_user(db, current_user.id, store_id))
