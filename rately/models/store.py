"""ORM model for rated stores."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from rately.models.base import Base, TimestampMixin


class Store(TimestampMixin, Base):
    """
    A rateable store, optionally bound to a store_owner user.

    average_rating and total_ratings are a cached projection of the ratings
    table; only services.aggregation writes them.
    """

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    address = Column(String(400), nullable=False)
    owner_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    average_rating = Column(
        Numeric(2, 1, asdecimal=False),
        nullable=False,
        default=0,
        server_default="0",
    )
    total_ratings = Column(Integer, nullable=False, default=0, server_default="0")

    owner = relationship("User", lazy="joined")
