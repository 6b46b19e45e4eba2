"""Core app configuration and database."""

from rawa.core.config import get_settings, settings
from rawa.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
