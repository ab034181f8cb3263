"""
Router pour la gestion des comptes utilisateurs (administrateurs uniquement).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services import user_service

router = APIRouter(
    prefix="/api/users",
    tags=["Utilisateurs"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[UserResponse], summary="Lister les comptes")
def list_users(db: Session = Depends(get_db)):
    return user_service.get_users(db)


@router.get("/{user_id}", response_model=UserResponse, summary="Détail d'un compte")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.post("", response_model=UserResponse, status_code=201, summary="Créer un compte")
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    """
    Crée un compte. Un compte « school » exige un school_id (400 sinon) ;
    un nom d'utilisateur déjà pris renvoie 409.
    """
    return user_service.create_user(db, data)


@router.put("/{user_id}", response_model=UserResponse, summary="Modifier un compte")
def update_user(user_id: int, data: UserUpdate, db: Session = Depends(get_db)):
    """Le mot de passe n'est modifié que s'il est fourni."""
    return user_service.update_user(db, user_id, data)


@router.delete("/{user_id}", status_code=204, summary="Supprimer un compte")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
