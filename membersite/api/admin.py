"""Admin page: list users and promote/demote them. Admin session required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from membersite.api.auth import require_admin
from membersite.core.database import get_db
from membersite.core.templates import render
from membersite.schemas.auth import AdminActionForm
from membersite.services.admin import apply_admin_action
from membersite.services.sessions import SessionManager
from membersite.services.users import list_users
from membersite.services.validation import validate_form

router = APIRouter()


def render_admin_page(request: Request, db: Session, error: str | None = None) -> HTMLResponse:
    """Render the admin view with freshly read users."""
    return render(request, "admin.html", {"users": list_users(db), "error": error})


@router.get("/admin", response_class=HTMLResponse)
def admin_page(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[SessionManager, Depends(require_admin)],
) -> HTMLResponse:
    return render_admin_page(request, db)


@router.post("/handleAdminClick", response_class=HTMLResponse)
def handle_admin_click(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[SessionManager, Depends(require_admin)],
    name: Annotated[str, Form()] = "",
    action: Annotated[str, Form()] = "",
    user_id: Annotated[str, Form()] = "",
) -> HTMLResponse:
    """
    Promote (-> admin) or demote (-> user) the named user, then show the refreshed list.
    Invalid input re-renders the page with the error and changes nothing.
    """
    data = {"name": name, "action": action}
    if user_id.strip():
        data["user_id"] = user_id.strip()
    result = validate_form(AdminActionForm, data)
    if not result.ok:
        return render_admin_page(request, db, error=result.error)

    apply_admin_action(db, result.value, acting_admin=admin.name)
    return render_admin_page(request, db)
