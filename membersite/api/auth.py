"""Signup, login and logout routes plus the session/admin guards used by other routers."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from membersite.core.config import Settings
from membersite.core.database import get_db
from membersite.core.security import hash_password, verify_password
from membersite.core.templates import render
from membersite.models import ROLE_ADMIN
from membersite.schemas.auth import LoginForm, SignupForm
from membersite.services.sessions import SessionManager
from membersite.services.users import DuplicateEmailError, create_user, find_by_email
from membersite.services.validation import validate_form

logger = logging.getLogger(__name__)
router = APIRouter()

# Same text for unknown email and wrong password so login does not reveal registered emails.
LOGIN_FAILED_MESSAGE = "Invalid email and password combination."


class LoginRequired(Exception):
    """Raised by require_session; the app turns it into a redirect to /login."""


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_web_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SessionManager:
    """Dependency: the web session named by the request's cookie (anonymous if none)."""
    return SessionManager.load(db, settings, request.cookies.get(settings.SESSION_COOKIE_NAME))


def require_session(
    web_session: Annotated[SessionManager, Depends(get_web_session)],
) -> SessionManager:
    """Dependency: require an authenticated, unexpired session. Redirects to /login otherwise."""
    if not web_session.is_authenticated():
        raise LoginRequired()
    return web_session


def require_admin(
    web_session: Annotated[SessionManager, Depends(require_session)],
) -> SessionManager:
    """Dependency: require a session whose role is 'admin'. Raises 403 for anyone else."""
    if web_session.user_type != ROLE_ADMIN:
        logger.info("Refused admin access for %s (user_type=%s)", web_session.name, web_session.user_type)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not Authorized",
        )
    return web_session


@router.get("/signup", response_class=HTMLResponse)
def signup_page(request: Request) -> HTMLResponse:
    return render(request, "signup.html")


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request) -> HTMLResponse:
    return render(request, "login.html")


@router.post("/submitUser", response_class=HTMLResponse)
def submit_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[SessionManager, Depends(get_web_session)],
    name: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
) -> Response:
    """Create a user from the signup form, start their session and send them to /members."""
    result = validate_form(SignupForm, {"name": name, "password": password, "email": email})
    if not result.ok:
        return render(request, "signup_error.html", {"error_message": result.error})
    form = result.value

    try:
        user = create_user(db, form.name, form.email, hash_password(form.password))
    except DuplicateEmailError as e:
        logger.info("Signup refused: email already registered")
        return render(request, "signup_error.html", {"error_message": e.message})

    web_session.start(user)
    response = RedirectResponse("/members", status_code=status.HTTP_302_FOUND)
    web_session.save(response)
    return response


@router.post("/loggingin", response_class=HTMLResponse)
def logging_in(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[SessionManager, Depends(get_web_session)],
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    """Check email and password against the store; on success start a session."""
    result = validate_form(LoginForm, {"email": email, "password": password})
    if not result.ok:
        return render(request, "login_error.html", {"error_type": result.error})
    form = result.value

    matches = find_by_email(db, form.email)
    if len(matches) != 1:
        logger.info("Login failed: %s matching accounts", len(matches))
        return render(request, "login_error.html", {"error_type": LOGIN_FAILED_MESSAGE})
    user = matches[0]

    if not verify_password(form.password, user.password_hash):
        logger.info("Login failed: wrong password for user id=%s", user.id)
        return render(request, "login_error.html", {"error_type": LOGIN_FAILED_MESSAGE})

    web_session.start(user)
    response = RedirectResponse("/members", status_code=status.HTTP_302_FOUND)
    web_session.save(response)
    logger.info("User id=%s logged in (user_type=%s)", user.id, user.role)
    return response


@router.get("/logout")
def logout(
    web_session: Annotated[SessionManager, Depends(get_web_session)],
) -> Response:
    logger.info("Logging out %s", web_session.name or "anonymous session")
    web_session.destroy()
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    web_session.save(response)
    return response
