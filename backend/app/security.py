"""
Sécurité : hachage des mots de passe, jetons JWT et politique d'accès par auto-école.

Toutes les vérifications « ce compte peut-il toucher une ressource de l'auto-école X ? »
passent par ensure_school_access, appelée par les services.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import ForbiddenError, UnauthenticatedError
from app.models.user import UserRole

logger = logging.getLogger(__name__)

# Limite de bcrypt : seuls les 72 premiers octets sont pris en compte
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class CurrentUser:
    """Appelant authentifié, résolu depuis le jeton puis relu en base."""
    id: int
    username: str
    role: UserRole
    school_id: Optional[int] = None


# --- Mots de passe ---

def hash_password(password: str) -> str:
    """Hache un mot de passe avec bcrypt (sel aléatoire inclus dans le hash)."""
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Hash stocké mal formé
        return False


# --- JWT ---

def create_access_token(
    user_id: int,
    username: str,
    role: str,
    school_id: Optional[int],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Signe un jeton contenant {id, username, role, school_id} (24h par défaut)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "username": username,
        "role": role,
        "school_id": school_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Vérifie la signature et l'expiration du jeton.
    Lève UnauthenticatedError si le jeton est invalide ou ne porte pas d'identifiant.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthenticatedError("Invalid token")
    if payload.get("id") is None:
        raise UnauthenticatedError("Invalid token")
    return payload


# --- Politique d'accès ---

def can_access_school(caller: CurrentUser, owner_school_id: Optional[int]) -> bool:
    """Vrai si l'appelant peut lire/modifier une ressource appartenant à owner_school_id."""
    if caller.role in (UserRole.ADMIN, UserRole.DGTT_AGENT):
        return True
    if caller.role is UserRole.SCHOOL:
        return caller.school_id is not None and owner_school_id == caller.school_id
    return False


def ensure_school_access(caller: CurrentUser, owner_school_id: Optional[int]) -> None:
    if not can_access_school(caller, owner_school_id):
        logger.warning(
            "Accès refusé : utilisateur %s (école %s) sur une ressource de l'école %s",
            caller.id, caller.school_id, owner_school_id,
        )
        raise ForbiddenError("Access denied")


def scoped_school_id(caller: CurrentUser) -> Optional[int]:
    """Filtre d'auto-école à appliquer aux listes (None = pas de filtre)."""
    if caller.role is UserRole.SCHOOL:
        return caller.school_id
    return None
