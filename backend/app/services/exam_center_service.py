"""
Service métier pour les centres d'examen (CRUD admin).
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, NotFoundError
from app.models.exam_center import ExamCenter
from app.schemas.exam_center import ExamCenterCreate, ExamCenterResponse, ExamCenterUpdate

logger = logging.getLogger(__name__)


def get_exam_centers(db: Session) -> list[ExamCenterResponse]:
    centers = db.execute(select(ExamCenter).order_by(ExamCenter.name)).scalars().all()
    return [ExamCenterResponse.model_validate(c) for c in centers]


def get_exam_center(db: Session, center_id: int) -> ExamCenterResponse:
    return ExamCenterResponse.model_validate(_get_or_404(db, center_id))


def create_exam_center(db: Session, data: ExamCenterCreate) -> ExamCenterResponse:
    center = ExamCenter(**data.model_dump())
    db.add(center)
    db.commit()
    db.refresh(center)
    logger.info("Centre d'examen créé : %s (%s)", center.name, center.id)
    return ExamCenterResponse.model_validate(center)


def update_exam_center(db: Session, center_id: int, data: ExamCenterUpdate) -> ExamCenterResponse:
    center = _get_or_404(db, center_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No valid fields provided for update")
    for field, value in update_data.items():
        setattr(center, field, value)

    db.commit()
    db.refresh(center)
    return ExamCenterResponse.model_validate(center)


def delete_exam_center(db: Session, center_id: int) -> None:
    center = _get_or_404(db, center_id)
    db.delete(center)
    db.commit()
    logger.info("Centre d'examen supprimé : %s", center_id)


def _get_or_404(db: Session, center_id: int) -> ExamCenter:
    center = db.get(ExamCenter, center_id)
    if center is None:
        raise NotFoundError("Exam center not found")
    return center
