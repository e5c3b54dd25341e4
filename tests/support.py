"""Shared builders for tests: settings, an app on in-memory SQLite, and seeded users."""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from membersite.core.config import Settings
from membersite.core.security import hash_password
from membersite.main import create_app
from membersite.models import Base, User
from membersite.services.users import create_user


def make_settings(**overrides: object) -> Settings:
    """Settings pointing at a private in-memory SQLite database, ignoring any .env file."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "APP_SESSION_SECRET": "test-app-session-secret",
        "SESSION_STORE_SECRET": "test-session-store-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_app(**overrides: object) -> FastAPI:
    """Application with its schema created on a fresh in-memory database."""
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(app.state.engine)
    return app


def make_client(app: FastAPI, raise_server_exceptions: bool = True) -> TestClient:
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


def db_session(app: FastAPI) -> Session:
    return app.state.session_factory()


def seed_user(
    app: FastAPI,
    name: str,
    email: str,
    password: str,
    user_type: str = "user",
) -> User:
    """Insert a user directly into the app's store."""
    db = db_session(app)
    try:
        return create_user(db, name, email, hash_password(password), user_type=user_type)
    finally:
        db.close()


def get_user(app: FastAPI, email: str) -> User | None:
    db = db_session(app)
    try:
        return db.query(User).filter(User.email == email).first()
    finally:
        db.close()


def log_in(client: TestClient, email: str, password: str):
    return client.post(
        "/loggingin",
        data={"email": email, "password": password},
        follow_redirects=False,
    )


def sign_up(client: TestClient, name: str, email: str, password: str):
    return client.post(
        "/submitUser",
        data={"name": name, "email": email, "password": password},
        follow_redirects=False,
    )
