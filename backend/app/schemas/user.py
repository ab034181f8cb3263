"""
Schémas Pydantic pour les comptes utilisateurs (gestion admin).
La cohérence rôle / auto-école est vérifiée par user_service (elle dépend de l'état en base).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from app.models.user import UserRole
from app.schemas.common import require_text


class UserCreate(BaseModel):
    username: str
    password: str
    role: UserRole = UserRole.SCHOOL
    school_id: Optional[int] = None

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        return require_text(v, "Username")

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserUpdate(BaseModel):
    """Le mot de passe n'est re-haché que s'il est fourni (et non vide)."""
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    school_id: Optional[int] = None

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: Optional[str]) -> str:
        return require_text(v, "Username")


class UserResponse(BaseModel):
    id: int
    username: str
    role: UserRole
    school_id: Optional[int]
    school_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
