"""
Router pour les dossiers de permis.
Accessible à tout compte authentifié ; un compte auto-école est limité à ses propres dossiers.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.dossier import (
    DossierCreate,
    DossierProgressUpdate,
    DossierResponse,
    DossierStepUpdate,
)
from app.security import CurrentUser
from app.services import dossier_service

router = APIRouter(prefix="/api/dossiers", tags=["Dossiers"])


@router.get("", response_model=List[DossierResponse], summary="Lister les dossiers")
def list_dossiers(
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Du plus récent au plus ancien, avec les compteurs d'étapes."""
    return dossier_service.get_dossiers(db, caller)


@router.get("/school/{school_id}", response_model=List[DossierResponse],
            summary="Dossiers d'une auto-école")
def list_school_dossiers(
    school_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return dossier_service.get_dossiers(db, caller, school_id=school_id)


@router.get("/{dossier_id}", response_model=DossierResponse, summary="Détail d'un dossier")
def get_dossier(
    dossier_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Retourne le dossier et ses huit étapes dans l'ordre du parcours."""
    return dossier_service.get_dossier(db, caller, dossier_id)


@router.post("", response_model=DossierResponse, status_code=201, summary="Ouvrir un dossier")
def create_dossier(
    data: DossierCreate,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Ouvre un dossier pour un élève et crée ses huit étapes (non terminées)
    dans une seule transaction.
    """
    return dossier_service.create_dossier(db, caller, data)


@router.patch("/{dossier_id}/step", response_model=DossierProgressUpdate,
              summary="Mettre à jour une étape")
def update_dossier_step(
    dossier_id: int,
    data: DossierStepUpdate,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Marque une étape terminée (ou non), avec sa date et son résultat,
    puis retourne la progression recalculée du dossier.
    """
    return dossier_service.update_step(db, caller, dossier_id, data)
