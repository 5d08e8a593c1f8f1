"""Account lifecycle: registration, login, profile, admin CRUD and cascading delete."""

import logging
from collections.abc import Callable

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rately.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from rately.core.roles import Role
from rately.core.security import hash_password, verify_password
from rately.models import Rating, Store, User
from rately.schemas.auth import PasswordUpdateRequest, ProfileUpdateRequest, RegisterRequest
from rately.schemas.common import UserPagination
from rately.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    DashboardStats,
    OwnedStoreSummary,
    UserDetail,
    UserOut,
    UsersListResponse,
)
from rately.services.aggregation import recompute_store_rating
from rately.services.listing import PageRequest, apply_text_filters, paginate, resolve_sort

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = {
    "name": User.name,
    "email": User.email,
    "address": User.address,
    "role": User.role,
    "createdAt": User.created_at,
}


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _insert_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    address: str,
    role: Role,
) -> User:
    if find_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        address=address,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("User with this email already exists") from e
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
    return user


def register_user(db: Session, body: RegisterRequest) -> User:
    """Self-service registration; always creates a normal_user."""
    return _insert_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        address=body.address,
        role=Role.NORMAL_USER,
    )


def create_user(db: Session, body: AdminUserCreate) -> User:
    """Admin creation with an explicit role."""
    return _insert_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        address=body.address,
        role=body.role,
    )


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials; same error for unknown email and wrong password."""
    user = find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return user


def _apply_updates(db: Session, user: User, fields: dict) -> User:
    email = fields.get("email")
    if email and email != user.email:
        clash = find_by_email(db, email)
        if clash is not None and clash.id != user.id:
            raise ConflictError("Email is already in use")
    for key, value in fields.items():
        setattr(user, key, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email is already in use") from e
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, body: AdminUserUpdate) -> User:
    """Partial admin update; the password is re-hashed only when a new one is supplied."""
    user = get_user(db, user_id)
    fields = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
    if body.password:
        fields["password_hash"] = hash_password(body.password)
    user = _apply_updates(db, user, fields)
    logger.info("User updated", extra={"user_id": user.id, "fields": sorted(fields)})
    return user


def update_profile(db: Session, user_id: int, body: ProfileUpdateRequest) -> User:
    """Self-service update of name, email and address."""
    user = get_user(db, user_id)
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    return _apply_updates(db, user, fields)


def change_password(db: Session, user_id: int, body: PasswordUpdateRequest) -> None:
    user = get_user(db, user_id)
    if not verify_password(body.current_password, user.password_hash):
        raise BadRequestError("Current password is incorrect")
    user.password_hash = hash_password(body.new_password)
    db.commit()
    logger.info("Password changed", extra={"user_id": user.id})


def delete_user(db: Session, user_id: int) -> None:
    """
    Delete a user with any store they own and every rating they wrote.

    Stores that lose ratings have their cached statistics recomputed.
    """
    user = get_user(db, user_id)
    # By owner_id: the role may have changed since the store was assigned.
    owned_store_ids = {
        row[0] for row in db.query(Store.id).filter(Store.owner_id == user.id).all()
    }

    rated_store_ids = {
        row[0]
        for row in db.query(Rating.store_id).filter(Rating.user_id == user.id).distinct().all()
    }

    db.query(Rating).filter(Rating.user_id == user.id).delete(synchronize_session=False)
    if owned_store_ids:
        db.query(Rating).filter(Rating.store_id.in_(owned_store_ids)).delete(
            synchronize_session=False
        )
        db.query(Store).filter(Store.id.in_(owned_store_ids)).delete(
            synchronize_session=False
        )
    db.delete(user)
    db.commit()
    logger.info(
        "User deleted",
        extra={
            "user_id": user_id,
            "stores_deleted": len(owned_store_ids),
            "stores_touched": len(rated_store_ids - owned_store_ids),
        },
    )

    for store_id in sorted(rated_store_ids - owned_store_ids):
        recompute_store_rating(db, store_id)


def list_users(
    db: Session,
    *,
    search: str | None = None,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    page: PageRequest = PageRequest(),
) -> UsersListResponse:
    """Admin user listing: search or per-field filters, role filter, sort, paginate."""
    query = apply_text_filters(
        db.query(User),
        search=search,
        search_columns=[User.name, User.email, User.address],
        field_filters={User.name: name, User.email: email, User.address: address},
    )
    if role is not None:
        query = query.filter(User.role == role)
    query = query.order_by(resolve_sort(sort_by, sort_order, USER_SORT_FIELDS), User.id.asc())
    result = paginate(query, page)
    return UsersListResponse(
        users=[UserOut.model_validate(u) for u in result.items],
        pagination=UserPagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_users=result.total,
            limit=result.limit,
        ),
    )


def _owned_store_summary(db: Session, user: User) -> dict:
    store = db.query(Store).filter(Store.owner_id == user.id).first()
    if store is None:
        return {"store": None}
    return {"store": OwnedStoreSummary.model_validate(store)}


# Role -> extra fields loaded for the admin user detail view.
ROLE_DETAIL_LOADERS: dict[Role, Callable[[Session, User], dict]] = {
    Role.STORE_OWNER: _owned_store_summary,
}


def get_user_detail(db: Session, user_id: int) -> UserDetail:
    user = get_user(db, user_id)
    base = UserOut.model_validate(user).model_dump()
    loader = ROLE_DETAIL_LOADERS.get(user.role)
    extra = loader(db, user) if loader else {}
    return UserDetail(**base, **extra)


def dashboard_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        total_users=db.query(func.count(User.id)).scalar() or 0,
        total_stores=db.query(func.count(Store.id)).scalar() or 0,
        total_ratings=db.query(func.count(Rating.id)).scalar() or 0,
    )
