"""SQLAlchemy ORM models."""

from rately.models.base import Base
from rately.models.rating import Rating
from rately.models.store import Store
from rately.models.user import User

__all__ = ["Base", "Rating", "Store", "User"]
