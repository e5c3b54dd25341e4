"""Password hashing, signed session cookies and encrypted stored session payloads."""

import base64
import hashlib
import json
from typing import Any

import bcrypt
import jwt
from cryptography.fernet import Fernet, InvalidToken

from membersite.core.config import Settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 12

# Field limits shared by the signup/admin forms and the users table.
NAME_MAX_LEN = 20
PASSWORD_MAX_LEN = 20
# bcrypt only reads the first 72 bytes of a password.
PASSWORD_MAX_BYTES = 72


class PasswordHashError(Exception):
    """Raised when hashing or verification cannot complete (e.g. malformed stored hash)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class SessionDataError(Exception):
    """Raised when a stored session payload cannot be decrypted or decoded."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def password_too_long(plain_password: str) -> bool:
    """True if bcrypt would ignore part of the password."""
    return len(plain_password.encode("utf-8")) > PASSWORD_MAX_BYTES


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if password_too_long(plain_password):
        raise PasswordHashError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    try:
        return bcrypt.hashpw(
            plain_password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        ).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise PasswordHashError("Password hashing failed", cause=e) from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.
    Raises PasswordHashError if the stored hash is unusable; that is never a plain mismatch.
    """
    # hash_password never accepts these, so no stored hash can match one.
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        raise PasswordHashError("Stored password hash could not be verified", cause=e) from e


def sign_session_id(session_id: str, settings: Settings) -> str:
    """Return the cookie value carrying session_id, signed with APP_SESSION_SECRET."""
    return jwt.encode(
        {"sid": session_id},
        settings.APP_SESSION_SECRET.get_secret_value(),
        algorithm=settings.SESSION_ALGORITHM,
    )


def read_session_id(cookie_value: str, settings: Settings) -> str | None:
    """Return the session id from a signed cookie value, or None if the signature is invalid."""
    try:
        payload = jwt.decode(
            cookie_value,
            settings.APP_SESSION_SECRET.get_secret_value(),
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None


def _store_cipher(settings: Settings) -> Fernet:
    # Fernet wants 32 url-safe base64 bytes; the secret itself may be any length.
    digest = hashlib.sha256(settings.SESSION_STORE_SECRET.get_secret_value().encode("utf-8")).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def seal_session_data(data: dict[str, Any], settings: Settings) -> str:
    """Serialize session data for the store, encrypted and authenticated with SESSION_STORE_SECRET."""
    plaintext = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return _store_cipher(settings).encrypt(plaintext).decode("ascii")


def open_session_data(sealed: str, settings: Settings) -> dict[str, Any]:
    """
    Decrypt sealed session data from the store.
    Raises SessionDataError if the payload was tampered with, sealed with another secret
    or does not hold a JSON object.
    """
    try:
        plaintext = _store_cipher(settings).decrypt(sealed.encode("ascii"))
        data = json.loads(plaintext)
    except (InvalidToken, ValueError) as e:
        raise SessionDataError("Stored session data could not be opened", cause=e) from e
    if not isinstance(data, dict):
        raise SessionDataError("Stored session data is not an object")
    return data
