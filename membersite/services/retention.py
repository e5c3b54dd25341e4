"""Session retention: delete session rows whose lifetime has run out."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from membersite.models import SessionRecord

logger = logging.getLogger(__name__)


def purge_expired_sessions(db: Session, now: datetime | None = None) -> int:
    """
    Delete sessions with expires_at <= now and return how many were removed.

    Expired sessions are already rejected on load, so this only reclaims space.
    Idempotent: safe to run repeatedly.
    """
    cutoff = now or datetime.now(UTC)
    deleted_count = (
        db.query(SessionRecord)
        .filter(SessionRecord.expires_at <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted_count > 0:
        logger.info(
            "Session purge: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
