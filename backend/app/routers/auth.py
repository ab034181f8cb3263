"""
Router d'authentification.
POST /api/auth/login : échange identifiant / mot de passe contre un jeton (24h)
GET  /api/auth/me    : profil du compte connecté
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.auth import AuthUser, LoginRequest, LoginResponse
from app.security import CurrentUser
from app.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentification"])


@router.post("/login", response_model=LoginResponse, summary="Se connecter")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Retourne 401 « Invalid credentials » si l'utilisateur est inconnu ou le mot de passe faux."""
    return auth_service.login(db, data)


@router.get("/me", response_model=AuthUser, summary="Compte connecté")
def me(
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return auth_service.get_profile(db, caller)
