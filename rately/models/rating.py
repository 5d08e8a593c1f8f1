"""ORM model for the rating ledger: one row per (user, store)."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from rately.models.base import Base, TimestampMixin

RATING_MIN = 1
RATING_MAX = 5


class Rating(TimestampMixin, Base):
    """A user's 1-5 rating of a store. Re-rating overwrites value."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_store"),
        CheckConstraint(
            f"value >= {RATING_MIN} AND value <= {RATING_MAX}",
            name="ck_ratings_value_range",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    store_id = Column(
        Integer,
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value = Column(Integer, nullable=False)

    user = relationship("User")
    store = relationship("Store")
