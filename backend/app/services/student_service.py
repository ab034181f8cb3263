"""
Service métier pour les élèves.

Un compte auto-école ne voit et ne modifie que ses propres élèves ;
à la création, l'élève est rattaché d'office à l'auto-école de l'appelant.
"""

import io
import logging
from typing import Optional

import qrcode
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.dossier import Dossier
from app.models.school import School
from app.models.student import Student
from app.models.user import UserRole
from app.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from app.security import CurrentUser, ensure_school_access, scoped_school_id

logger = logging.getLogger(__name__)


def get_students(
    db: Session,
    caller: CurrentUser,
    school_id: Optional[int] = None,
) -> list[StudentResponse]:
    """
    Retourne les élèves triés par nom puis prénom.
    school_id restreint à une auto-école ; un compte auto-école est toujours restreint à la sienne.
    """
    if school_id is not None:
        ensure_school_access(caller, school_id)
    else:
        school_id = scoped_school_id(caller)

    query = _student_query()
    if school_id is not None:
        query = query.where(Student.school_id == school_id)
    query = query.order_by(Student.last_name, Student.first_name)

    return [_to_response(student, school_name) for student, school_name in db.execute(query).all()]


def get_student(db: Session, caller: CurrentUser, student_id: int) -> StudentResponse:
    row = db.execute(_student_query().where(Student.id == student_id)).first()
    if row is None:
        raise NotFoundError("Student not found")
    student, school_name = row
    ensure_school_access(caller, student.school_id)
    return _to_response(student, school_name)


def create_student(db: Session, caller: CurrentUser, data: StudentCreate) -> StudentResponse:
    """
    Crée un élève.
    - compte auto-école : rattaché à sa propre école, school_id envoyé ignoré
    - admin : school_id obligatoire
    Sans qr_code fourni, le QR code pointe vers la fiche élève du frontend.
    """
    if caller.role is UserRole.SCHOOL:
        school_id = caller.school_id
    else:
        school_id = data.school_id
    if school_id is None:
        raise BadRequestError("school_id is required")
    if db.get(School, school_id) is None:
        raise NotFoundError("School not found")

    student = Student(
        **data.model_dump(exclude={"school_id", "status"}),
        school_id=school_id,
        status=data.status or "active",
    )
    db.add(student)
    try:
        db.flush()  # Obtenir l'ID pour le QR code par défaut
        if not student.qr_code:
            student.qr_code = default_qr_payload(student.id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A student with this email or identifier already exists")

    logger.info("Élève créé : %s (école %s)", student.id, school_id)
    return get_student(db, caller, student.id)


def update_student(
    db: Session,
    caller: CurrentUser,
    student_id: int,
    data: StudentUpdate,
) -> StudentResponse:
    """Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés."""
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    ensure_school_access(caller, student.school_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No valid fields provided for update")
    for field, value in update_data.items():
        setattr(student, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A student with this email or identifier already exists")

    return get_student(db, caller, student_id)


def delete_student(db: Session, caller: CurrentUser, student_id: int) -> None:
    """Supprime un élève. Bloqué (ConflictError) si l'élève possède au moins un dossier."""
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    ensure_school_access(caller, student.school_id)

    nb_dossiers = db.execute(
        select(func.count()).select_from(Dossier).where(Dossier.student_id == student_id)
    ).scalar() or 0
    if nb_dossiers:
        raise ConflictError(
            "Cannot delete student. This student has related records in other tables."
        )

    db.delete(student)
    db.commit()
    logger.info("Élève supprimé : %s", student_id)


def default_qr_payload(student_id: int) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/student/{student_id}"


def generate_qr_image(payload: str) -> bytes:
    """Génère une image PNG du QR code encodant le contenu donné."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def get_student_qr_code(db: Session, caller: CurrentUser, student_id: int) -> bytes:
    """PNG du QR code de l'élève (qr_code enregistré, sinon l'URL de sa fiche)."""
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    ensure_school_access(caller, student.school_id)
    return generate_qr_image(student.qr_code or default_qr_payload(student.id))


def _student_query():
    return select(Student, School.name).outerjoin(School, School.id == Student.school_id)


def _to_response(student: Student, school_name: Optional[str]) -> StudentResponse:
    response = StudentResponse.model_validate(student)
    response.school_name = school_name
    return response
