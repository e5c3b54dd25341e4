"""ORM model for server-side login sessions."""

from sqlalchemy import Column, DateTime, String, Text, func

from membersite.models.base import Base


class SessionRecord(Base):
    """
    One persisted web session, keyed by the id carried in the signed cookie.

    data holds the sealed payload (authenticated, name, user_type).
    """

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    data = Column(Text, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
