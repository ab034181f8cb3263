"""
Service d'authentification : échange identifiant / mot de passe contre un jeton JWT.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import UnauthenticatedError
from app.models.school import School
from app.schemas.auth import AuthUser, LoginRequest, LoginResponse
from app.security import CurrentUser, create_access_token, verify_password
from app.services.user_service import get_user_by_username

logger = logging.getLogger(__name__)


def login(db: Session, data: LoginRequest) -> LoginResponse:
    """
    Vérifie les identifiants et retourne un jeton signé (24h) et le profil du compte.
    Utilisateur inconnu et mauvais mot de passe renvoient la même erreur.
    """
    user = get_user_by_username(db, data.username)
    if user is None or not verify_password(data.password, user.password):
        logger.warning("Échec de connexion pour %r", data.username)
        raise UnauthenticatedError("Invalid credentials")

    token = create_access_token(
        user_id=user.id,
        username=user.username,
        role=user.role,
        school_id=user.school_id,
    )
    logger.info("Connexion réussie : %s", user.username)

    return LoginResponse(
        token=token,
        user=AuthUser(
            id=user.id,
            username=user.username,
            role=user.role,
            school_id=user.school_id,
            school_name=_school_name(db, user.school_id),
        ),
    )


def get_profile(db: Session, caller: CurrentUser) -> AuthUser:
    """Profil du compte connecté, avec le nom de son auto-école."""
    return AuthUser(
        id=caller.id,
        username=caller.username,
        role=caller.role,
        school_id=caller.school_id,
        school_name=_school_name(db, caller.school_id),
    )


def _school_name(db: Session, school_id: Optional[int]) -> Optional[str]:
    if school_id is None:
        return None
    return db.execute(select(School.name).where(School.id == school_id)).scalar()
