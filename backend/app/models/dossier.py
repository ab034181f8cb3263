"""
Modèles SQLAlchemy pour les dossiers de permis et leurs étapes.

Un dossier possède exactement huit étapes, créées en même temps que lui,
dans l'ordre de STEP_SEQUENCE. Seuls completed, completion_date et result
évoluent ensuite.
"""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)

from app.database import Base


class DossierStepName(str, enum.Enum):
    REGISTRATION = "registration"
    PAYMENT = "payment"
    MEDICAL_CHECK = "medical_check"
    THEORY_COURSE = "theory_course"
    THEORY_EXAM = "theory_exam"
    PRACTICE_COURSE = "practice_course"
    PRACTICE_EXAM = "practice_exam"
    LICENSE_ISSUED = "license_issued"


# Ordre canonique du parcours : step_order = index + 1
STEP_SEQUENCE = tuple(DossierStepName)


class DossierStatus(str, enum.Enum):
    REGISTRATION = "registration"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Dossier(Base):
    __tablename__ = "dossiers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    student_name = Column(String(255), nullable=False)  # copie au moment de la création
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=True)
    license_type = Column(String(10), default="B")
    status = Column(String(50), default=DossierStatus.REGISTRATION.value)
    progress = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class DossierStep(Base):
    __tablename__ = "dossier_steps"
    __table_args__ = (UniqueConstraint("dossier_id", "step_name", name="uq_dossier_step"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    dossier_id = Column(Integer, ForeignKey("dossiers.id", ondelete="CASCADE"), nullable=False)
    step_name = Column(String(50), nullable=False)
    step_order = Column(Integer, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completion_date = Column(Date, nullable=True)
    result = Column(String(10), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
