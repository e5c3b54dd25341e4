"""SQLAlchemy ORM models."""

from membersite.models.base import Base
from membersite.models.session import SessionRecord
from membersite.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = ["Base", "ROLE_ADMIN", "ROLE_USER", "SessionRecord", "User"]
