"""Jinja2 template environment and the page/error rendering helpers."""

from datetime import datetime
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from membersite.core.config import Settings

APP_NAME = "Members Only"


def build_templates(settings: Settings) -> Jinja2Templates:
    """Create the template engine for TEMPLATES_DIR with site-wide globals."""
    templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
    templates.env.globals.update({
        "datetime": datetime,
        "APP_NAME": APP_NAME,
    })
    return templates


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(request, name, context or {}, status_code=status_code)


def render_error(request: Request, message: str, status_code: int) -> HTMLResponse:
    """Shared error view: one human-readable message, no structured codes."""
    return render(request, "error.html", {"error": message}, status_code=status_code)
