"""Credential store access: create, look up, list and re-role site members."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from membersite.models import ROLE_ADMIN, ROLE_USER, User
from membersite.schemas.auth import UserListItem

logger = logging.getLogger(__name__)

VALID_ROLES = (ROLE_USER, ROLE_ADMIN)


class DuplicateEmailError(Exception):
    """Raised when a user is created with an email that is already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        self.message = "An account with that email already exists."
        super().__init__(self.message)


def create_user(
    db: Session,
    name: str,
    email: str,
    password_hash: str,
    user_type: str = ROLE_USER,
) -> User:
    """Insert a new user. password_hash must already be a hash output."""
    if user_type not in VALID_ROLES:
        raise ValueError(f"user_type must be one of {VALID_ROLES}")
    user = User(name=name, email=email, password_hash=password_hash, user_type=user_type)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmailError(email) from e
    db.refresh(user)
    logger.info("Created user id=%s name=%s user_type=%s", user.id, user.name, user.user_type)
    return user


def find_by_email(db: Session, email: str) -> list[User]:
    """Return every user with this email. Callers treat anything but exactly one as not found."""
    return db.query(User).filter(User.email == email).all()


def list_users(db: Session) -> list[UserListItem]:
    """Return id, name and role of every user; password hashes never leave this module."""
    rows = db.query(User.id, User.name, User.user_type).order_by(User.id).all()
    return [
        UserListItem(id=row.id, name=row.name, user_type=row.user_type or ROLE_USER)
        for row in rows
    ]


def set_role(db: Session, name: str, role: str, user_id: int | None = None) -> int:
    """
    Set user_type for every user named name, or only for user_id when given.

    Returns the number of updated rows. Concurrent updates are last-write-wins.
    """
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of {VALID_ROLES}")
    query = db.query(User).filter(User.name == name)
    if user_id is not None:
        query = query.filter(User.id == user_id)
    updated = query.update({User.user_type: role}, synchronize_session=False)
    db.commit()
    logger.info("Set user_type=%s for name=%s user_id=%s (rows=%s)", role, name, user_id, updated)
    return updated
