"""Pydantic form payloads and response schemas."""

from membersite.schemas.auth import (
    AdminActionForm,
    LoginForm,
    SessionData,
    SignupForm,
    UserListItem,
)
from membersite.schemas.health import HealthResponse

__all__ = [
    "AdminActionForm",
    "HealthResponse",
    "LoginForm",
    "SessionData",
    "SignupForm",
    "UserListItem",
]
