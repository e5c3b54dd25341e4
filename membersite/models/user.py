"""ORM model for site members (credentials and role)."""

from sqlalchemy import Column, Integer, String

from membersite.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    """
    Member account for session login and role-based access control.

    user_type: 'admin' or 'user'. Email is the login key and is unique; name is not.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(20), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    user_type = Column(String(32), nullable=False, default=ROLE_USER)

    @property
    def role(self) -> str:
        """user_type, reading a missing value as a plain user."""
        return self.user_type or ROLE_USER
