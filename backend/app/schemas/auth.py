"""
Schémas Pydantic pour l'authentification.
"""

from typing import Optional

from pydantic import BaseModel

from app.models.user import UserRole


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthUser(BaseModel):
    """Profil renvoyé au frontend, jamais de hash de mot de passe."""
    id: int
    username: str
    role: UserRole
    school_id: Optional[int] = None
    school_name: Optional[str] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: AuthUser
