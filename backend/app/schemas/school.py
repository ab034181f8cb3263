"""
Schémas Pydantic pour les auto-écoles, leurs statistiques et leur activité récente.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.common import CAMEL_CONFIG, blank_to_none, require_text


class SchoolCreate(BaseModel):
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    director_name: Optional[str] = None

    @field_validator("address", "phone", "email", "director_name", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return require_text(v, "School name")


class SchoolUpdate(BaseModel):
    """Mise à jour partielle : seuls les champs envoyés sont modifiés."""
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    director_name: Optional[str] = None

    @field_validator("address", "phone", "email", "director_name", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> str:
        return require_text(v, "School name")


class SchoolResponse(BaseModel):
    id: int
    name: str
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    director_name: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SchoolStats(BaseModel):
    total_students: int
    total_dossiers: int
    completed_dossiers: int
    in_progress_dossiers: int

    model_config = CAMEL_CONFIG


class RecentActivity(BaseModel):
    """Dernière modification d'une étape de dossier d'un élève de l'auto-école."""
    student_name: str
    step_name: str
    status: str
    date: Optional[datetime]
    type: str  # completed | inprogress

    model_config = CAMEL_CONFIG
