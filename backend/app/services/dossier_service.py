"""
Service métier des dossiers de permis.

Un dossier est créé avec ses huit étapes dans une seule transaction.
La progression persistée (dossiers.progress) est la seule source de vérité :
elle est recalculée et enregistrée dans la même transaction que chaque
modification d'étape, et les lectures la renvoient telle quelle.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.dossier import STEP_SEQUENCE, Dossier, DossierStatus, DossierStep
from app.models.student import Student
from app.schemas.dossier import (
    DossierCreate,
    DossierProgressUpdate,
    DossierResponse,
    DossierStepResponse,
    DossierStepUpdate,
    StepProgressItem,
    StudentDossierProgress,
)
from app.security import CurrentUser, ensure_school_access, scoped_school_id

logger = logging.getLogger(__name__)


def compute_progress(completed_steps: int, total_steps: int) -> int:
    """
    Pourcentage entier d'étapes terminées, arrondi au demi supérieur (1/8 → 13).
    Un dossier sans étape vaut 0.
    """
    if total_steps <= 0:
        return 0
    return (200 * completed_steps + total_steps) // (2 * total_steps)


def status_for_progress(progress: int) -> str:
    if progress <= 0:
        return DossierStatus.REGISTRATION.value
    if progress >= 100:
        return DossierStatus.COMPLETED.value
    return DossierStatus.IN_PROGRESS.value


def create_dossier(db: Session, caller: CurrentUser, data: DossierCreate) -> DossierResponse:
    """
    Ouvre un dossier pour un élève et initialise ses huit étapes, non terminées,
    dans l'ordre canonique.

    Lève NotFoundError si l'élève n'existe pas, ForbiddenError si l'élève
    appartient à une autre auto-école que celle de l'appelant.
    """
    student = db.get(Student, data.student_id)
    if student is None:
        raise NotFoundError("Student not found")
    ensure_school_access(caller, student.school_id)

    dossier = Dossier(
        student_id=student.id,
        student_name=f"{student.first_name} {student.last_name}",
        school_id=student.school_id,
        license_type=data.license_type,
        progress=0,
    )
    try:
        db.add(dossier)
        db.flush()  # Obtenir l'ID avant d'insérer les étapes

        db.add_all([
            DossierStep(
                dossier_id=dossier.id,
                step_name=step_name.value,
                step_order=order,
                completed=False,
            )
            for order, step_name in enumerate(STEP_SEQUENCE, start=1)
        ])
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(dossier)
    logger.info(
        "Dossier créé : %s pour l'élève %s (permis %s, école %s)",
        dossier.id, student.id, dossier.license_type, dossier.school_id,
    )
    return get_dossier(db, caller, dossier.id)


def update_step(
    db: Session,
    caller: CurrentUser,
    dossier_id: int,
    data: DossierStepUpdate,
) -> DossierProgressUpdate:
    """
    Met à jour une étape puis recalcule et persiste la progression du dossier.

    Une étape terminée sans date reçoit la date du jour ; une étape remise à
    « non terminée » sans date perd sa date de complétion.
    Le résultat (ex. "Failed") n'influence pas la progression.
    """
    dossier = db.get(Dossier, dossier_id)
    if dossier is None:
        raise NotFoundError("Dossier not found")
    ensure_school_access(caller, dossier.school_id)

    step = db.execute(
        select(DossierStep).where(
            DossierStep.dossier_id == dossier_id,
            DossierStep.step_name == data.step.value,
        )
    ).scalar_one_or_none()
    if step is None:
        raise NotFoundError(f"Step '{data.step.value}' not found for dossier {dossier_id}")

    try:
        step.completed = data.completed
        step.completion_date = data.date or (date.today() if data.completed else None)
        step.result = data.result
        db.flush()

        completed_steps, total_steps = _count_steps(db, dossier_id)
        progress = compute_progress(completed_steps, total_steps)
        status = status_for_progress(progress)

        dossier.progress = progress
        dossier.status = status
        dossier.updated_at = func.now()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Dossier %s : étape %s → completed=%s, progression %d%%",
        dossier_id, data.step.value, data.completed, progress,
    )
    return DossierProgressUpdate(
        dossier_id=dossier_id,
        step=data.step,
        progress=progress,
        status=status,
    )


def get_dossiers(
    db: Session,
    caller: CurrentUser,
    school_id: Optional[int] = None,
) -> list[DossierResponse]:
    """
    Retourne les dossiers du plus récent au plus ancien.
    Un compte auto-école ne voit que les siens ; demander une autre école lève ForbiddenError.
    """
    if school_id is not None:
        ensure_school_access(caller, school_id)
    else:
        school_id = scoped_school_id(caller)

    query = _dossier_query()
    if school_id is not None:
        query = query.where(Dossier.school_id == school_id)
    query = query.order_by(Dossier.created_at.desc(), Dossier.id.desc())

    return [
        _to_response(dossier, completed_steps, total_steps)
        for dossier, completed_steps, total_steps in db.execute(query).all()
    ]


def get_dossier(db: Session, caller: CurrentUser, dossier_id: int) -> DossierResponse:
    """Retourne un dossier avec ses étapes ordonnées."""
    row = db.execute(_dossier_query().where(Dossier.id == dossier_id)).first()
    if row is None:
        raise NotFoundError("Dossier not found")
    dossier, completed_steps, total_steps = row
    ensure_school_access(caller, dossier.school_id)

    response = _to_response(dossier, completed_steps, total_steps)
    response.steps = [DossierStepResponse.model_validate(s) for s in _ordered_steps(db, dossier.id)]
    return response


def get_student_dossier_progress(
    db: Session,
    caller: CurrentUser,
    student_id: int,
) -> StudentDossierProgress:
    """
    Parcours d'un élève : son dossier le plus récent et la liste ordonnée des étapes.
    Lève NotFoundError si l'élève n'existe pas ou n'a aucun dossier.
    """
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    ensure_school_access(caller, student.school_id)

    dossier = db.execute(
        select(Dossier)
        .where(Dossier.student_id == student_id)
        .order_by(Dossier.created_at.desc(), Dossier.id.desc())
        .limit(1)
    ).scalar_one_or_none()
    if dossier is None:
        raise NotFoundError("No dossier found for this student")

    steps = _ordered_steps(db, dossier.id)
    if not steps:
        raise NotFoundError("No dossier steps found for this student")

    return StudentDossierProgress(
        dossier_id=dossier.id,
        student_name=f"{student.first_name} {student.last_name}",
        license_type=dossier.license_type,
        progress=dossier.progress,
        steps=[
            StepProgressItem(
                step_name=s.step_name,
                completed=s.completed,
                completion_date=s.completion_date,
                result=s.result,
            )
            for s in steps
        ],
    )


def _count_steps(db: Session, dossier_id: int) -> tuple[int, int]:
    """Retourne (étapes terminées, étapes totales) pour un dossier."""
    completed_steps, total_steps = db.execute(
        select(
            func.coalesce(func.sum(case((DossierStep.completed.is_(True), 1), else_=0)), 0),
            func.count(DossierStep.id),
        ).where(DossierStep.dossier_id == dossier_id)
    ).one()
    return int(completed_steps or 0), int(total_steps or 0)


def _dossier_query():
    """SELECT dossier + compteurs d'étapes (terminées, totales) en une seule requête."""
    counts = (
        select(
            DossierStep.dossier_id.label("dossier_id"),
            func.sum(case((DossierStep.completed.is_(True), 1), else_=0)).label("completed_steps"),
            func.count(DossierStep.id).label("total_steps"),
        )
        .group_by(DossierStep.dossier_id)
        .subquery()
    )
    return (
        select(Dossier, counts.c.completed_steps, counts.c.total_steps)
        .outerjoin(counts, counts.c.dossier_id == Dossier.id)
    )


def _ordered_steps(db: Session, dossier_id: int) -> list[DossierStep]:
    return list(
        db.execute(
            select(DossierStep)
            .where(DossierStep.dossier_id == dossier_id)
            .order_by(DossierStep.step_order)
        ).scalars().all()
    )


def _to_response(dossier: Dossier, completed_steps, total_steps) -> DossierResponse:
    return DossierResponse(
        id=dossier.id,
        student_id=dossier.student_id,
        student_name=dossier.student_name,
        school_id=dossier.school_id,
        license_type=dossier.license_type,
        status=dossier.status,
        progress=dossier.progress,
        completed_steps=int(completed_steps or 0),
        total_steps=int(total_steps or 0),
        created_at=dossier.created_at,
        updated_at=dossier.updated_at,
    )
