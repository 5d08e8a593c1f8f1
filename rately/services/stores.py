"""Store registry: admin create/list/delete, user-facing listings and the owner dashboard."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager, joinedload

from rately.core.errors import ConflictError, NotFoundError
from rately.core.roles import Role
from rately.models import Rating, Store, User
from rately.models.rating import RATING_MAX, RATING_MIN
from rately.schemas.common import RatingPagination, StorePagination
from rately.schemas.rating import OwnerDashboardResponse, OwnerDashboardStore, OwnerRatingItem
from rately.schemas.store import (
    AdminStoreCreate,
    AdminStoreItem,
    AdminStoresListResponse,
    UserStoreItem,
    UserStoresListResponse,
)
from rately.services.listing import (
    PageRequest,
    apply_text_filters,
    contains,
    paginate,
    resolve_sort,
)

logger = logging.getLogger(__name__)

ADMIN_STORE_SORT_FIELDS = {
    "name": Store.name,
    "email": Store.email,
    "address": Store.address,
    "averageRating": Store.average_rating,
    "totalRatings": Store.total_ratings,
    "createdAt": Store.created_at,
}

USER_STORE_SORT_FIELDS = {
    "name": Store.name,
    "address": Store.address,
    "averageRating": Store.average_rating,
    "totalRatings": Store.total_ratings,
}

UNASSIGNED_OWNER = "N/A"


def get_store(db: Session, store_id: int) -> Store:
    store = db.get(Store, store_id)
    if store is None:
        raise NotFoundError("Store not found")
    return store


def create_store(db: Session, body: AdminStoreCreate) -> Store:
    """Create a store, optionally bound to an existing store_owner without a store."""
    if db.query(Store.id).filter(func.lower(Store.email) == body.email).first() is not None:
        raise ConflictError("Store with this email already exists")

    if body.owner_id is not None:
        owner = db.get(User, body.owner_id)
        if owner is None or owner.role != Role.STORE_OWNER:
            raise ConflictError("Invalid store owner ID")
        if db.query(Store.id).filter(Store.owner_id == owner.id).first() is not None:
            raise ConflictError("Store owner already has a store")

    store = Store(
        name=body.name,
        email=body.email,
        address=body.address,
        owner_id=body.owner_id,
        average_rating=0,
        total_ratings=0,
    )
    db.add(store)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Store with this email already exists") from e
    db.refresh(store)
    logger.info("Store created", extra={"store_id": store.id, "owner_id": store.owner_id})
    return store


def delete_store(db: Session, store_id: int) -> None:
    """Delete a store together with every rating that references it."""
    store = get_store(db, store_id)
    removed = (
        db.query(Rating).filter(Rating.store_id == store.id).delete(synchronize_session=False)
    )
    db.delete(store)
    db.commit()
    logger.info("Store deleted", extra={"store_id": store_id, "ratings_deleted": removed})


def list_stores_admin(
    db: Session,
    *,
    search: str | None = None,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    page: PageRequest = PageRequest(),
) -> AdminStoresListResponse:
    query = apply_text_filters(
        db.query(Store).options(joinedload(Store.owner)),
        search=search,
        search_columns=[Store.name, Store.email, Store.address],
        field_filters={Store.name: name, Store.email: email, Store.address: address},
    )
    query = query.order_by(
        resolve_sort(sort_by, sort_order, ADMIN_STORE_SORT_FIELDS), Store.id.asc()
    )
    result = paginate(query, page)
    stores = [
        AdminStoreItem(
            id=s.id,
            name=s.name,
            email=s.email,
            address=s.address,
            owner_id=s.owner_id,
            owner_name=s.owner.name if s.owner else UNASSIGNED_OWNER,
            owner_email=s.owner.email if s.owner else UNASSIGNED_OWNER,
            average_rating=s.average_rating,
            total_ratings=s.total_ratings,
            created_at=s.created_at,
            updated_at=s.updated_at,
        )
        for s in result.items
    ]
    return AdminStoresListResponse(
        stores=stores,
        pagination=StorePagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_stores=result.total,
            limit=result.limit,
        ),
    )


def _user_store_item(store: Store, user_rating: int | None) -> UserStoreItem:
    return UserStoreItem(
        id=store.id,
        name=store.name,
        address=store.address,
        average_rating=store.average_rating,
        total_ratings=store.total_ratings,
        user_rating=user_rating,
    )


def list_stores_for_user(
    db: Session,
    user_id: int,
    *,
    search: str | None = None,
    name: str | None = None,
    address: str | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    page: PageRequest = PageRequest(),
) -> UserStoresListResponse:
    """Store listing for a normal user, each row carrying that user's own rating (or null)."""
    query = apply_text_filters(
        db.query(Store),
        search=search,
        search_columns=[Store.name, Store.email, Store.address],
        field_filters={Store.name: name, Store.address: address},
    )
    query = query.order_by(
        resolve_sort(sort_by, sort_order, USER_STORE_SORT_FIELDS), Store.id.asc()
    )
    result = paginate(query, page)

    store_ids = [s.id for s in result.items]
    own = {}
    if store_ids:
        own = dict(
            db.query(Rating.store_id, Rating.value)
            .filter(Rating.user_id == user_id, Rating.store_id.in_(store_ids))
            .all()
        )
    return UserStoresListResponse(
        stores=[_user_store_item(s, own.get(s.id)) for s in result.items],
        pagination=StorePagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_stores=result.total,
            limit=result.limit,
        ),
    )


def get_store_for_user(db: Session, user_id: int, store_id: int) -> UserStoreItem:
    store = get_store(db, store_id)
    value = (
        db.query(Rating.value)
        .filter(Rating.user_id == user_id, Rating.store_id == store.id)
        .scalar()
    )
    return _user_store_item(store, value)


def store_rank(db: Session, store: Store) -> int:
    """1 + number of stores with a strictly higher cached average; ties share a rank."""
    higher = (
        db.query(func.count(Store.id))
        .filter(Store.average_rating > store.average_rating)
        .scalar()
    )
    return (higher or 0) + 1


def rating_distribution(db: Session, store_id: int) -> dict[str, int]:
    """Count of ratings per value, every value from RATING_MIN to RATING_MAX present."""
    distribution = {str(v): 0 for v in range(RATING_MAX, RATING_MIN - 1, -1)}
    rows = (
        db.query(Rating.value, func.count(Rating.id))
        .filter(Rating.store_id == store_id)
        .group_by(Rating.value)
        .all()
    )
    for value, count in rows:
        distribution[str(value)] = count
    return distribution


def owner_dashboard(
    db: Session,
    owner_id: int,
    *,
    search: str | None = None,
    page: PageRequest = PageRequest(),
) -> OwnerDashboardResponse:
    """
    Dashboard for a store owner: store stats, rank, distribution and paginated ratings.

    An owner without a store gets store=None and an empty page, not an error.
    """
    store = db.query(Store).filter(Store.owner_id == owner_id).first()
    if store is None:
        return OwnerDashboardResponse(
            store=None,
            ratings=[],
            pagination=RatingPagination(
                current_page=1, total_pages=0, total_ratings=0, limit=page.limit
            ),
        )

    query = (
        db.query(Rating)
        .join(User, Rating.user_id == User.id)
        .options(contains_eager(Rating.user))
        .filter(Rating.store_id == store.id)
    )
    if search and search.strip():
        term = search.strip()
        query = query.filter(or_(contains(User.name, term), contains(User.email, term)))
    query = query.order_by(Rating.updated_at.desc(), Rating.id.desc())
    result = paginate(query, page)

    return OwnerDashboardResponse(
        store=OwnerDashboardStore(
            id=store.id,
            name=store.name,
            email=store.email,
            address=store.address,
            average_rating=store.average_rating,
            total_ratings=store.total_ratings,
            rank=store_rank(db, store),
            distribution=rating_distribution(db, store.id),
        ),
        ratings=[
            OwnerRatingItem(
                id=r.id,
                rating=r.value,
                user_name=r.user.name,
                user_email=r.user.email,
                created_at=r.created_at,
                updated_at=r.updated_at,
            )
            for r in result.items
        ],
        pagination=RatingPagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_ratings=result.total,
            limit=result.limit,
        ),
    )
