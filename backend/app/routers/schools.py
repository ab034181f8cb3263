"""
Router pour les auto-écoles.
CRUD réservé aux administrateurs ; statistiques et activité récente ouvertes
à tout compte authentifié ayant accès à l'auto-école.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_admin
from app.schemas.school import (
    RecentActivity,
    SchoolCreate,
    SchoolResponse,
    SchoolStats,
    SchoolUpdate,
)
from app.security import CurrentUser
from app.services import school_service

router = APIRouter(prefix="/api/schools", tags=["Auto-écoles"])


@router.get("", response_model=List[SchoolResponse], summary="Lister les auto-écoles",
            dependencies=[Depends(require_admin)])
def list_schools(db: Session = Depends(get_db)):
    return school_service.get_schools(db)


@router.get("/{school_id}", response_model=SchoolResponse, summary="Détail d'une auto-école",
            dependencies=[Depends(require_admin)])
def get_school(school_id: int, db: Session = Depends(get_db)):
    return school_service.get_school(db, school_id)


@router.post("", response_model=SchoolResponse, status_code=201, summary="Créer une auto-école",
             dependencies=[Depends(require_admin)])
def create_school(data: SchoolCreate, db: Session = Depends(get_db)):
    return school_service.create_school(db, data)


@router.put("/{school_id}", response_model=SchoolResponse, summary="Modifier une auto-école",
            dependencies=[Depends(require_admin)])
def update_school(school_id: int, data: SchoolUpdate, db: Session = Depends(get_db)):
    """Seuls les champs fournis sont modifiés ; un corps sans champ reconnu renvoie 400."""
    return school_service.update_school(db, school_id, data)


@router.delete("/{school_id}", status_code=204, summary="Supprimer une auto-école",
               dependencies=[Depends(require_admin)])
def delete_school(school_id: int, db: Session = Depends(get_db)):
    """Refusé (409) tant que des élèves, comptes ou dossiers sont rattachés à l'auto-école."""
    school_service.delete_school(db, school_id)


@router.get("/{school_id}/stats", response_model=SchoolStats,
            summary="Statistiques d'une auto-école")
def get_school_stats(
    school_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return school_service.get_school_stats(db, caller, school_id)


@router.get("/{school_id}/recent-activity", response_model=List[RecentActivity],
            summary="Activité récente d'une auto-école")
def get_recent_activity(
    school_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Les dix dernières étapes de dossier modifiées."""
    return school_service.get_recent_activity(db, caller, school_id)
