"""Core app configuration, database and security primitives."""

from membersite.core.config import Settings, get_settings
from membersite.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
