"""Rating submission (create or overwrite) and a user's own rating history."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from rately.core.errors import BadRequestError, NotFoundError
from rately.models import Rating, Store
from rately.models.rating import RATING_MAX, RATING_MIN
from rately.schemas.rating import UserRatingItem
from rately.services.aggregation import recompute_store_rating

logger = logging.getLogger(__name__)


def validate_rating_value(value: Any) -> int:
    """Accept only true integers in [RATING_MIN, RATING_MAX]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequestError(
            f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}"
        )
    if not (RATING_MIN <= value <= RATING_MAX):
        raise BadRequestError(
            f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}"
        )
    return value


def _find_rating(db: Session, user_id: int, store_id: int) -> Rating | None:
    return (
        db.query(Rating)
        .filter(Rating.user_id == user_id, Rating.store_id == store_id)
        .first()
    )


def submit_rating(db: Session, user_id: int, store_id: int | None, value: Any) -> Rating:
    """
    Create the user's rating for a store, or overwrite the existing one.

    Every successful write is followed by a full recompute of the store's
    cached statistics. A concurrent first-time submission that loses the race
    on the (user, store) unique constraint is retried once as an overwrite.
    """
    if store_id is None or value is None:
        raise BadRequestError("Store ID and rating are required")
    value = validate_rating_value(value)

    store = db.get(Store, store_id)
    if store is None:
        raise NotFoundError("Store not found")

    rating = _find_rating(db, user_id, store_id)
    if rating is not None:
        rating.value = value
        db.commit()
    else:
        rating = Rating(user_id=user_id, store_id=store_id, value=value)
        db.add(rating)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            rating = _find_rating(db, user_id, store_id)
            if rating is None:
                raise
            logger.info(
                "Concurrent first rating; retrying as overwrite",
                extra={"user_id": user_id, "store_id": store_id},
            )
            rating.value = value
            db.commit()

    recompute_store_rating(db, store_id)
    return rating


def list_user_ratings(db: Session, user_id: int) -> list[UserRatingItem]:
    """All ratings authored by the user, most recently updated first."""
    ratings = (
        db.query(Rating)
        .options(joinedload(Rating.store))
        .filter(Rating.user_id == user_id)
        .order_by(Rating.updated_at.desc(), Rating.id.desc())
        .all()
    )
    return [
        UserRatingItem(
            id=r.id,
            rating=r.value,
            store_id=r.store_id,
            store_name=r.store.name,
            store_address=r.store.address,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )
        for r in ratings
    ]
