"""Core app configuration and database."""

from rately.core.config import get_settings, settings
from rately.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
