"""
Router pour les centres d'examen (administrateurs uniquement).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.schemas.exam_center import ExamCenterCreate, ExamCenterResponse, ExamCenterUpdate
from app.services import exam_center_service

router = APIRouter(
    prefix="/api/exam-centers",
    tags=["Centres d'examen"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[ExamCenterResponse], summary="Lister les centres d'examen")
def list_exam_centers(db: Session = Depends(get_db)):
    return exam_center_service.get_exam_centers(db)


@router.get("/{center_id}", response_model=ExamCenterResponse, summary="Détail d'un centre")
def get_exam_center(center_id: int, db: Session = Depends(get_db)):
    return exam_center_service.get_exam_center(db, center_id)


@router.post("", response_model=ExamCenterResponse, status_code=201, summary="Créer un centre")
def create_exam_center(data: ExamCenterCreate, db: Session = Depends(get_db)):
    return exam_center_service.create_exam_center(db, data)


@router.put("/{center_id}", response_model=ExamCenterResponse, summary="Modifier un centre")
def update_exam_center(center_id: int, data: ExamCenterUpdate, db: Session = Depends(get_db)):
    """Seuls les champs fournis sont modifiés."""
    return exam_center_service.update_exam_center(db, center_id, data)


@router.delete("/{center_id}", status_code=204, summary="Supprimer un centre")
def delete_exam_center(center_id: int, db: Session = Depends(get_db)):
    exam_center_service.delete_exam_center(db, center_id)
