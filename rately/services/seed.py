"""Idempotent bootstrap data: default accounts, one owned store and sample ratings."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from rately.core.roles import Role
from rately.core.security import hash_password
from rately.models import Rating, Store, User
from rately.services.aggregation import resync_all_stores
from rately.services.users import find_by_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedAccount:
    name: str
    email: str
    password: str
    address: str
    role: Role


ADMIN = SeedAccount(
    name="System Administrator Account",
    email="admin@rately.com",
    password="Admin@123",
    address="123 Admin Street, Admin City, Admin State 12345",
    role=Role.SYSTEM_ADMIN,
)
NORMAL_USER = SeedAccount(
    name="Normal User Account for Testing",
    email="user@rately.com",
    password="User@123",
    address="456 User Avenue, User City, User State 67890",
    role=Role.NORMAL_USER,
)
STORE_OWNER = SeedAccount(
    name="Store Owner Account for Testing",
    email="store@rately.com",
    password="Store@123",
    address="789 Store Blvd, Store City, Store State 13579",
    role=Role.STORE_OWNER,
)
EXTRA_RATERS = tuple(
    SeedAccount(
        name=f"Test User {i}",
        email=f"user{i}@rately.com",
        password="User@123",
        address=f"Test Address {i}",
        role=Role.NORMAL_USER,
    )
    for i in range(1, 5)
)

SEED_STORE_NAME = "Tech Gadgets and Electronics Superstore"
SEED_STORE_EMAIL = "info@techgadgets.com"
# Rating per rater, in order: NORMAL_USER then EXTRA_RATERS.
SEED_RATINGS = (5, 4, 5, 5, 4)


@dataclass
class SeedReport:
    users_created: int = 0
    store_created: bool = False
    ratings_created: int = 0
    stores_synced: int = 0


def _ensure_account(db: Session, account: SeedAccount, report: SeedReport) -> User:
    user = find_by_email(db, account.email)
    if user is not None:
        return user
    user = User(
        name=account.name,
        email=account.email,
        password_hash=hash_password(account.password),
        address=account.address,
        role=account.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    report.users_created += 1
    logger.info("Seeded account", extra={"email": account.email, "role": account.role.value})
    return user


def _ensure_store(db: Session, owner: User, report: SeedReport) -> Store:
    store = db.query(Store).filter(Store.owner_id == owner.id).first()
    if store is not None:
        return store
    # A store left over from an earlier database state is re-bound to the owner.
    store = db.query(Store).filter(Store.email == SEED_STORE_EMAIL).first()
    if store is not None:
        store.owner_id = owner.id
        db.commit()
        return store
    store = Store(
        name=SEED_STORE_NAME,
        email=SEED_STORE_EMAIL,
        address=STORE_OWNER.address,
        owner_id=owner.id,
    )
    db.add(store)
    db.commit()
    db.refresh(store)
    report.store_created = True
    return store


def seed_database(db: Session) -> SeedReport:
    """
    Create the default data set where missing, then resync every store's cached stats.

    Safe to run on every startup: existing rows are found by email and left alone.
    """
    report = SeedReport()
    _ensure_account(db, ADMIN, report)
    normal_user = _ensure_account(db, NORMAL_USER, report)
    owner = _ensure_account(db, STORE_OWNER, report)
    raters = [normal_user] + [_ensure_account(db, a, report) for a in EXTRA_RATERS]

    store = _ensure_store(db, owner, report)
    for rater, value in zip(raters, SEED_RATINGS):
        exists = (
            db.query(Rating.id)
            .filter(Rating.user_id == rater.id, Rating.store_id == store.id)
            .first()
        )
        if exists is None:
            db.add(Rating(user_id=rater.id, store_id=store.id, value=value))
            report.ratings_created += 1
    db.commit()

    report.stores_synced = resync_all_stores(db)
    logger.info(
        "Database seed complete",
        extra={
            "users_created": report.users_created,
            "store_created": report.store_created,
            "ratings_created": report.ratings_created,
            "stores_synced": report.stores_synced,
        },
    )
    return report
