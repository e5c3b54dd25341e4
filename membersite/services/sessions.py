"""Server-side web sessions: load from the signed cookie, start on login, destroy on logout."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from fastapi import Response
from sqlalchemy.orm import Session

from membersite.core.config import Settings
from membersite.core.security import (
    SessionDataError,
    open_session_data,
    read_session_id,
    seal_session_data,
    sign_session_id,
)
from membersite.models import SessionRecord, User
from membersite.schemas.auth import SessionData

logger = logging.getLogger(__name__)


def _utc(dt: datetime) -> datetime:
    """SQLite returns naive datetimes; treat them as UTC."""
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionManager:
    """
    The web session attached to one request.

    Mutations (start, destroy) only change this object; save() commits them to
    the sessions table and sets or clears the cookie on the response.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        session_id: str | None = None,
        data: SessionData | None = None,
        expires_at: datetime | None = None,
    ) -> None:
        self._db = db
        self._settings = settings
        self.session_id = session_id
        self.data = data or SessionData()
        self.expires_at = expires_at
        self._stale_ids: list[str] = []
        self._modified = False
        self._destroyed = False

    @classmethod
    def load(
        cls,
        db: Session,
        settings: Settings,
        cookie_value: str | None,
        now: datetime | None = None,
    ) -> "SessionManager":
        """Restore the session named by the cookie; anything unusable yields an anonymous session."""
        if not cookie_value:
            return cls(db, settings)
        session_id = read_session_id(cookie_value, settings)
        if session_id is None:
            logger.debug("Ignoring session cookie with invalid signature")
            return cls(db, settings)
        record = db.get(SessionRecord, session_id)
        if record is None:
            return cls(db, settings)
        now = now or datetime.now(UTC)
        expires_at = _utc(record.expires_at)
        if expires_at <= now:
            return cls(db, settings)
        try:
            payload = open_session_data(record.data, settings)
        except SessionDataError as e:
            logger.warning("Discarding session %s: %s", session_id[:8], e.message)
            return cls(db, settings)
        return cls(
            db,
            settings,
            session_id=session_id,
            data=SessionData.model_validate(payload),
            expires_at=expires_at,
        )

    @property
    def name(self) -> str | None:
        return self.data.name

    @property
    def user_type(self) -> str:
        return self.data.user_type

    def is_authenticated(self, now: datetime | None = None) -> bool:
        """True iff the session was started and has not expired."""
        if not self.data.authenticated or self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) < self.expires_at

    def start(self, user: User, now: datetime | None = None) -> None:
        """Mark the session authenticated as user, with a fresh id and a full lifetime."""
        if self.session_id is not None:
            self._stale_ids.append(self.session_id)
        now = now or datetime.now(UTC)
        self.session_id = new_session_id()
        self.data = SessionData(authenticated=True, name=user.name, user_type=user.role)
        self.expires_at = now + timedelta(minutes=self._settings.SESSION_EXPIRE_MINUTES)
        self._modified = True
        self._destroyed = False

    def destroy(self) -> None:
        """Invalidate the session; save() deletes it from the store."""
        if self.session_id is not None:
            self._stale_ids.append(self.session_id)
        self.session_id = None
        self.data = SessionData()
        self.expires_at = None
        self._modified = False
        self._destroyed = True

    def save(self, response: Response) -> None:
        """Commit pending changes to the store, then update the cookie on response."""
        if not (self._modified or self._destroyed):
            return
        if self._stale_ids:
            self._db.query(SessionRecord).filter(
                SessionRecord.id.in_(self._stale_ids)
            ).delete(synchronize_session=False)
        if self._modified:
            self._db.merge(
                SessionRecord(
                    id=self.session_id,
                    data=seal_session_data(self.data.model_dump(), self._settings),
                    expires_at=self.expires_at,
                )
            )
        self._db.commit()
        self._stale_ids = []

        cookie_name = self._settings.SESSION_COOKIE_NAME
        if self._modified:
            response.set_cookie(
                cookie_name,
                sign_session_id(self.session_id, self._settings),
                max_age=self._settings.SESSION_EXPIRE_MINUTES * 60,
                httponly=True,
                samesite="lax",
                secure=self._settings.APP_ENV == "prod",
            )
        else:
            response.delete_cookie(cookie_name)
        self._modified = False
        self._destroyed = False
