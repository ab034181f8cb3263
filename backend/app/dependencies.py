"""
Dépendances FastAPI d'authentification et d'autorisation.

get_current_user résout le jeton Bearer en compte utilisateur ;
require_admin / require_admin_or_school filtrent ensuite par rôle.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from app.models.user import User, UserRole
from app.security import CurrentUser, decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False : l'absence de jeton est traitée ici (401) et non par FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Vérifie le jeton et relit l'utilisateur en base (rôle et école à jour)."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Access token missing")

    payload = decode_access_token(credentials.credentials)

    user = db.get(User, payload["id"])
    if user is None:
        raise NotFoundError("User not found")

    try:
        role = UserRole(user.role)
    except ValueError:
        raise ForbiddenError(f"Unknown role: {user.role}")

    if role is UserRole.SCHOOL and user.school_id is None:
        raise ForbiddenError("School account is not attached to a school")

    return CurrentUser(id=user.id, username=user.username, role=role, school_id=user.school_id)


def require_roles(*roles: UserRole, detail: str = "Access denied"):
    """Fabrique une dépendance qui n'accepte que les rôles listés."""
    allowed = frozenset(roles)

    def dependency(caller: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if caller.role not in allowed:
            logger.warning("Rôle %s refusé (attendu : %s)", caller.role.value, sorted(r.value for r in allowed))
            raise ForbiddenError(detail)
        return caller

    return dependency


require_admin = require_roles(UserRole.ADMIN, detail="Admin access required")
require_admin_or_school = require_roles(
    UserRole.ADMIN, UserRole.SCHOOL, detail="Admin or school access required"
)
