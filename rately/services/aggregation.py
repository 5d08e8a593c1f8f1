"""Keep each store's cached average_rating / total_ratings equal to its ledger."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rately.models import Rating, Store

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


def round_average(value: float | Decimal | None) -> float:
    """Round a mean half-up to one decimal place; None (no ratings) becomes 0.0."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_store_rating(db: Session, store_id: int) -> tuple[float, int]:
    """Aggregate the ledger for one store: (rounded mean, count)."""
    count, average = (
        db.query(func.count(Rating.id), func.avg(Rating.value))
        .filter(Rating.store_id == store_id)
        .one()
    )
    count = int(count or 0)
    return (round_average(average) if count else 0.0), count


def recompute_store_rating(db: Session, store_id: int) -> tuple[float, int] | None:
    """
    Recompute a store's cached statistics from scratch and commit them.

    Called right after every committed ledger write. The ledger write has
    already succeeded, so a failure here is rolled back and logged rather than
    raised; resync_all_stores repairs any store left behind.
    Returns (average, count), or None if the write failed.
    """
    try:
        average, count = compute_store_rating(db, store_id)
        db.query(Store).filter(Store.id == store_id).update(
            {Store.average_rating: average, Store.total_ratings: count},
            synchronize_session="fetch",
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Store rating recompute failed",
            extra={"store_id": store_id},
        )
        return None
    logger.debug(
        "Store rating recomputed",
        extra={"store_id": store_id, "average_rating": average, "total_ratings": count},
    )
    return average, count


def resync_all_stores(db: Session) -> int:
    """Recompute every store's cached statistics; returns how many stores were synced."""
    store_ids = [row[0] for row in db.query(Store.id).order_by(Store.id).all()]
    synced = 0
    for store_id in store_ids:
        if recompute_store_rating(db, store_id) is not None:
            synced += 1
    logger.info("Store ratings resynced", extra={"store_count": synced})
    return synced
