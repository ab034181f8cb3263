"""
Tests du service des élèves sur SQLite : rattachement à l'auto-école,
cloisonnement, suppression bloquée par un dossier, QR code.
"""

import pytest

from app.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.models.student import Student
from app.models.user import UserRole
from app.schemas.dossier import DossierCreate
from app.schemas.student import StudentCreate, StudentUpdate
from app.security import CurrentUser
from app.services.dossier_service import create_dossier
from app.services.student_service import (
    create_student,
    default_qr_payload,
    delete_student,
    generate_qr_image,
    get_student,
    get_student_qr_code,
    get_students,
    update_student,
)

ADMIN = CurrentUser(id=1, username="admin", role=UserRole.ADMIN)
SCHOOL_A = CurrentUser(id=2, username="ecole-a", role=UserRole.SCHOOL, school_id=1)
SCHOOL_B = CurrentUser(id=3, username="ecole-b", role=UserRole.SCHOOL, school_id=2)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


# --- create_student ---

def test_create_student_compte_ecole_force_son_ecole(db_session, schools):
    """Le school_id envoyé par un compte auto-école est ignoré."""
    student = create_student(db_session, SCHOOL_A, StudentCreate(
        first_name="Awa", last_name="Mouity", school_id=schools[1].id,
    ))

    assert student.school_id == schools[0].id
    assert student.school_name == "Auto-école A"
    assert student.status == "active"
    assert student.qr_code == default_qr_payload(student.id)


def test_create_student_admin_sans_ecole(db_session, schools):
    with pytest.raises(BadRequestError, match="school_id is required"):
        create_student(db_session, ADMIN, StudentCreate(first_name="Awa", last_name="Mouity"))


def test_create_student_ecole_inexistante(db_session, schools):
    with pytest.raises(NotFoundError, match="School not found"):
        create_student(db_session, ADMIN, StudentCreate(first_name="Awa", last_name="Mouity", school_id=99))


def test_create_student_qr_code_fourni_conserve(db_session, schools):
    student = create_student(db_session, ADMIN, StudentCreate(
        first_name="Awa", last_name="Mouity", school_id=schools[1].id, qr_code="CUSTOM-42",
    ))
    assert student.qr_code == "CUSTOM-42"


def test_create_student_nfc_uid_en_double(db_session, schools):
    create_student(db_session, ADMIN, StudentCreate(
        first_name="Awa", last_name="Mouity", school_id=schools[0].id, nfc_uid="04:A2:FF",
    ))
    with pytest.raises(ConflictError):
        create_student(db_session, ADMIN, StudentCreate(
            first_name="Jean", last_name="Obiang", school_id=schools[0].id, nfc_uid="04:A2:FF",
        ))


# --- lectures ---

def test_get_students_cloisonne_et_trie(db_session, schools):
    db_session.add_all([
        Student(first_name="Zoé", last_name="Ndong", school_id=schools[0].id),
        Student(first_name="Anne", last_name="Ndong", school_id=schools[0].id),
        Student(first_name="Paul", last_name="Biyoghe", school_id=schools[0].id),
        Student(first_name="Luc", last_name="Autre", school_id=schools[1].id),
    ])
    db_session.commit()

    names = [(s.last_name, s.first_name) for s in get_students(db_session, SCHOOL_A)]
    assert names == [("Biyoghe", "Paul"), ("Ndong", "Anne"), ("Ndong", "Zoé")]
    assert len(get_students(db_session, ADMIN)) == 4
    assert [s.first_name for s in get_students(db_session, ADMIN, school_id=schools[1].id)] == ["Luc"]


def test_get_students_autre_ecole_refuse(db_session, schools):
    with pytest.raises(ForbiddenError):
        get_students(db_session, SCHOOL_A, school_id=schools[1].id)


def test_get_student_autre_ecole_refuse(db_session, student_a):
    with pytest.raises(ForbiddenError):
        get_student(db_session, SCHOOL_B, student_a.id)
    assert get_student(db_session, SCHOOL_A, student_a.id).first_name == "Marie"


def test_get_student_introuvable(db_session):
    with pytest.raises(NotFoundError, match="Student not found"):
        get_student(db_session, ADMIN, 404)


# --- update_student ---

def test_update_student_partiel(db_session, student_a):
    updated = update_student(db_session, SCHOOL_A, student_a.id, StudentUpdate(phone="+241 01 02 03"))
    assert updated.phone == "+241 01 02 03"
    assert updated.first_name == "Marie"
    assert updated.last_name == "Nze"


def test_update_student_vide(db_session, student_a):
    with pytest.raises(BadRequestError, match="No valid fields"):
        update_student(db_session, ADMIN, student_a.id, StudentUpdate())


def test_update_student_autre_ecole(db_session, student_a):
    with pytest.raises(ForbiddenError):
        update_student(db_session, SCHOOL_B, student_a.id, StudentUpdate(phone="x"))


# --- delete_student ---

def test_delete_student(db_session, student_a):
    delete_student(db_session, SCHOOL_A, student_a.id)
    with pytest.raises(NotFoundError):
        get_student(db_session, ADMIN, student_a.id)


def test_delete_student_avec_dossier_bloque(db_session, student_a):
    create_dossier(db_session, ADMIN, DossierCreate(student_id=student_a.id))
    with pytest.raises(ConflictError, match="related records"):
        delete_student(db_session, ADMIN, student_a.id)


def test_delete_student_introuvable(db_session):
    with pytest.raises(NotFoundError):
        delete_student(db_session, ADMIN, 12)


# --- QR code ---

def test_generate_qr_image_png():
    assert generate_qr_image("http://localhost:3000/student/1").startswith(PNG_SIGNATURE)


def test_get_student_qr_code(db_session, student_a):
    png = get_student_qr_code(db_session, SCHOOL_A, student_a.id)
    assert png.startswith(PNG_SIGNATURE)


def test_get_student_qr_code_autre_ecole(db_session, student_a):
    with pytest.raises(ForbiddenError):
        get_student_qr_code(db_session, SCHOOL_B, student_a.id)
