"""Landing page and the members-only page."""

import random
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from membersite.api.auth import get_web_session
from membersite.core.templates import render
from membersite.services.sessions import SessionManager

router = APIRouter()

MEMBER_IMAGES = ("cat", "dog", "bunny")


def pick_member_image() -> str:
    """File name of a random member picture, e.g. 'dog.jpeg'."""
    return random.choice(MEMBER_IMAGES) + ".jpeg"


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    web_session: Annotated[SessionManager, Depends(get_web_session)],
) -> HTMLResponse:
    if not web_session.is_authenticated():
        return render(request, "main_page.html")
    return render(request, "logged_in_home.html", {"name": web_session.name})


@router.get("/members", response_class=HTMLResponse)
def members(
    request: Request,
    web_session: Annotated[SessionManager, Depends(get_web_session)],
) -> Response:
    # Anonymous visitors go back to the landing page, not to /login.
    if not web_session.is_authenticated():
        return RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    return render(
        request,
        "members.html",
        {"name": web_session.name, "file_path": pick_member_image()},
    )
