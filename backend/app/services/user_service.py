"""
Service métier pour les comptes utilisateurs (gestion admin) et le compte admin par défaut.

Règle rôle / auto-école : un compte "school" doit être rattaché à une auto-école
existante ; les autres rôles ne le sont jamais (school_id forcé à None).
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.school import School
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.security import hash_password

logger = logging.getLogger(__name__)


def get_users(db: Session) -> list[UserResponse]:
    """Retourne tous les comptes, du plus récent au plus ancien, avec le nom de l'auto-école."""
    rows = db.execute(
        select(User, School.name)
        .outerjoin(School, School.id == User.school_id)
        .order_by(User.created_at.desc(), User.id.desc())
    ).all()
    return [_to_response(user, school_name) for user, school_name in rows]


def get_user(db: Session, user_id: int) -> UserResponse:
    row = db.execute(
        select(User, School.name)
        .outerjoin(School, School.id == User.school_id)
        .where(User.id == user_id)
    ).first()
    if row is None:
        raise NotFoundError("User not found")
    user, school_name = row
    return _to_response(user, school_name)


def create_user(db: Session, data: UserCreate) -> UserResponse:
    """
    Crée un compte. Le mot de passe est haché avant insertion.
    Lève ConflictError si le nom d'utilisateur est déjà pris.
    """
    school_id = _resolve_school_id(db, data.role, data.school_id)
    _ensure_username_available(db, data.username)

    user = User(
        username=data.username,
        password=hash_password(data.password),
        role=data.role.value,
        school_id=school_id,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username already exists")
    db.refresh(user)

    logger.info("Utilisateur créé : %s (rôle %s, école %s)", user.username, user.role, user.school_id)
    return get_user(db, user.id)


def update_user(db: Session, user_id: int, data: UserUpdate) -> UserResponse:
    """
    Met à jour les champs fournis. Le mot de passe n'est re-haché que s'il est fourni.
    La cohérence rôle / auto-école est revérifiée sur l'état résultant.
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No valid fields provided for update")

    role = data.role if data.role is not None else UserRole(user.role)
    requested_school_id = update_data.get("school_id", user.school_id)
    user.school_id = _resolve_school_id(db, role, requested_school_id)
    user.role = role.value

    if data.username is not None and data.username != user.username:
        _ensure_username_available(db, data.username)
        user.username = data.username

    if data.password:
        user.password = hash_password(data.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username already exists")

    return get_user(db, user_id)


def delete_user(db: Session, user_id: int) -> None:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("Utilisateur supprimé : %s", user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def ensure_default_admin(db: Session) -> bool:
    """
    Crée le compte administrateur par défaut s'il n'existe pas.
    Retourne True si le compte vient d'être créé.
    """
    if get_user_by_username(db, settings.DEFAULT_ADMIN_USERNAME) is not None:
        return False

    db.add(User(
        username=settings.DEFAULT_ADMIN_USERNAME,
        password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN.value,
        school_id=None,
    ))
    db.commit()
    logger.info("Compte administrateur par défaut créé : %s", settings.DEFAULT_ADMIN_USERNAME)
    return True


def _resolve_school_id(db: Session, role: UserRole, school_id: Optional[int]) -> Optional[int]:
    if role is not UserRole.SCHOOL:
        return None
    if school_id is None:
        raise BadRequestError("school_id is required for school accounts")
    if db.get(School, school_id) is None:
        raise NotFoundError("School not found")
    return school_id


def _ensure_username_available(db: Session, username: str) -> None:
    if get_user_by_username(db, username) is not None:
        raise ConflictError("Username already exists")


def _to_response(user: User, school_name: Optional[str]) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        school_id=user.school_id,
        school_name=school_name,
        created_at=user.created_at,
    )
