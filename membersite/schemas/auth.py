"""Typed form payloads and session/user views for the auth and admin pages."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from membersite.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    password_too_long,
)


class SignupForm(BaseModel):
    """Fields posted by the signup page."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    email: EmailStr

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
        return v


class LoginForm(BaseModel):
    """Fields posted by the login page. The password is only checked against the stored hash."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminActionForm(BaseModel):
    """Promote/demote request from the admin page; user_id narrows the target to one record."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, pattern=r"^[A-Za-z0-9]+$")
    action: Literal["promote", "demote"]
    user_id: int | None = Field(default=None, gt=0)


class SessionData(BaseModel):
    """Payload kept in a web session; name and user_type are copied at login."""

    authenticated: bool = False
    name: str | None = None
    user_type: Literal["user", "admin"] = "user"


class UserListItem(BaseModel):
    """User entry for the admin page (no email, no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    user_type: Literal["user", "admin"] = "user"
