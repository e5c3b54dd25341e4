"""Admin role management: translate promote/demote actions into role updates."""

import logging

from sqlalchemy.orm import Session

from membersite.models import ROLE_ADMIN, ROLE_USER
from membersite.schemas.auth import AdminActionForm
from membersite.services.users import set_role

logger = logging.getLogger(__name__)

ACTION_ROLES = {
    "promote": ROLE_ADMIN,
    "demote": ROLE_USER,
}


def apply_admin_action(db: Session, form: AdminActionForm, acting_admin: str | None = None) -> int:
    """Apply a validated admin action; returns how many users changed role."""
    # AdminActionForm only admits the keys of ACTION_ROLES.
    role = ACTION_ROLES[form.action]
    updated = set_role(db, form.name, role, user_id=form.user_id)
    if updated == 0:
        logger.info("Admin %s: %s matched no user named %s", acting_admin, form.action, form.name)
    else:
        logger.info("Admin %s: %s %s -> %s", acting_admin, form.action, form.name, role)
    return updated
