"""
Router pour les élèves.
CRUD ouvert aux administrateurs et aux comptes auto-école (limités à leurs élèves).
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_admin_or_school
from app.schemas.dossier import StudentDossierProgress
from app.schemas.student import (
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    StudentVerifyRequest,
)
from app.security import CurrentUser
from app.services import dossier_service, student_service

router = APIRouter(prefix="/api/students", tags=["Élèves"])


@router.get("", response_model=List[StudentResponse], summary="Lister les élèves")
def list_students(
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    """Triés par nom puis prénom ; un compte auto-école ne voit que ses élèves."""
    return student_service.get_students(db, caller)


@router.get("/school/{school_id}", response_model=List[StudentResponse],
            summary="Élèves d'une auto-école")
def list_school_students(
    school_id: int,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    return student_service.get_students(db, caller, school_id=school_id)


@router.post("/verify", response_model=StudentResponse, summary="Vérifier un élève scanné")
def verify_student(
    data: StudentVerifyRequest,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    """
    Utilisé par le scanner QR : retourne la fiche si l'élève appartient
    à l'auto-école de l'appelant, 403 sinon.
    """
    return student_service.get_student(db, caller, data.student_id)


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(
    student_id: int,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    return student_service.get_student(db, caller, student_id)


@router.post("", response_model=StudentResponse, status_code=201, summary="Créer un élève")
def create_student(
    data: StudentCreate,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    return student_service.create_student(db, caller, data)


@router.put("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
def update_student(
    student_id: int,
    data: StudentUpdate,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    """Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés."""
    return student_service.update_student(db, caller, student_id, data)


@router.delete("/{student_id}", status_code=204, summary="Supprimer un élève")
def delete_student(
    student_id: int,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    """Refusé (409) si l'élève possède un dossier."""
    student_service.delete_student(db, caller, student_id)


@router.get("/{student_id}/qr-code", summary="QR code d'un élève (PNG)",
            response_class=Response)
def get_student_qr_code(
    student_id: int,
    caller: CurrentUser = Depends(require_admin_or_school),
    db: Session = Depends(get_db),
):
    png = student_service.get_student_qr_code(db, caller, student_id)
    return Response(content=png, media_type="image/png")


@router.get("/{student_id}/dossier-progress", response_model=StudentDossierProgress,
            summary="Parcours du dossier d'un élève")
def get_dossier_progress(
    student_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Étapes ordonnées du dossier le plus récent de l'élève."""
    return dossier_service.get_student_dossier_progress(db, caller, student_id)
