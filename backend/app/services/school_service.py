"""
Service métier pour les auto-écoles : CRUD (admin), statistiques et activité récente.
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.dossier import Dossier, DossierStatus, DossierStep
from app.models.school import School
from app.models.student import Student
from app.models.user import User
from app.schemas.school import (
    RecentActivity,
    SchoolCreate,
    SchoolResponse,
    SchoolStats,
    SchoolUpdate,
)
from app.security import CurrentUser, ensure_school_access

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


def get_schools(db: Session) -> list[SchoolResponse]:
    """Retourne toutes les auto-écoles, triées par nom."""
    schools = db.execute(select(School).order_by(School.name)).scalars().all()
    return [SchoolResponse.model_validate(s) for s in schools]


def get_school(db: Session, school_id: int) -> SchoolResponse:
    return SchoolResponse.model_validate(_get_or_404(db, school_id))


def create_school(db: Session, data: SchoolCreate) -> SchoolResponse:
    school = School(**data.model_dump())
    db.add(school)
    db.commit()
    db.refresh(school)
    logger.info("Auto-école créée : %s (%s)", school.name, school.id)
    return SchoolResponse.model_validate(school)


def update_school(db: Session, school_id: int, data: SchoolUpdate) -> SchoolResponse:
    """Met à jour les champs fournis. Lève BadRequestError si aucun champ n'est fourni."""
    school = _get_or_404(db, school_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No valid fields provided for update")
    for field, value in update_data.items():
        setattr(school, field, value)

    db.commit()
    db.refresh(school)
    return SchoolResponse.model_validate(school)


def delete_school(db: Session, school_id: int) -> None:
    """
    Supprime une auto-école.
    Bloqué (ConflictError) tant que des élèves, comptes ou dossiers y sont rattachés.
    """
    school = _get_or_404(db, school_id)

    for model, label in ((Student, "students"), (User, "users"), (Dossier, "dossiers")):
        count = db.execute(
            select(func.count()).select_from(model).where(model.school_id == school_id)
        ).scalar() or 0
        if count:
            raise ConflictError(
                f"Cannot delete school: {count} {label} still attached to it."
            )

    db.delete(school)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Cannot delete school: it still has related records.")
    logger.info("Auto-école supprimée : %s", school_id)


def get_school_stats(db: Session, caller: CurrentUser, school_id: int) -> SchoolStats:
    """Compteurs du tableau de bord d'une auto-école."""
    ensure_school_access(caller, school_id)
    _get_or_404(db, school_id)

    def count(model, *conditions) -> int:
        return db.execute(
            select(func.count()).select_from(model).where(model.school_id == school_id, *conditions)
        ).scalar() or 0

    return SchoolStats(
        total_students=count(Student),
        total_dossiers=count(Dossier),
        completed_dossiers=count(Dossier, Dossier.status == DossierStatus.COMPLETED.value),
        in_progress_dossiers=count(Dossier, Dossier.status == DossierStatus.IN_PROGRESS.value),
    )


def get_recent_activity(db: Session, caller: CurrentUser, school_id: int) -> list[RecentActivity]:
    """
    Dernières étapes modifiées (terminées ou avec un résultat) sur les dossiers
    de l'auto-école, de la plus récente à la plus ancienne.
    """
    ensure_school_access(caller, school_id)
    _get_or_404(db, school_id)

    rows = db.execute(
        select(Dossier.student_name, DossierStep)
        .select_from(DossierStep)
        .join(Dossier, Dossier.id == DossierStep.dossier_id)
        .where(
            Dossier.school_id == school_id,
            or_(DossierStep.completed.is_(True), DossierStep.result.is_not(None)),
        )
        .order_by(DossierStep.updated_at.desc(), DossierStep.id.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).all()

    return [
        RecentActivity(
            student_name=student_name,
            step_name=step.step_name,
            status="completed" if step.completed else "pending",
            date=step.updated_at,
            type="completed" if step.completed else "inprogress",
        )
        for student_name, step in rows
    ]


def _get_or_404(db: Session, school_id: int) -> School:
    school = db.get(School, school_id)
    if school is None:
        raise NotFoundError("School not found")
    return school
