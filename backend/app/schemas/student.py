"""
Schémas Pydantic pour les élèves.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.common import blank_to_none, require_text

STUDENT_STATUSES = {"active", "inactive"}

_OPTIONAL_FIELDS = (
    "email", "phone", "date_of_birth", "birth_country", "address", "status",
    "nip", "cnss_number", "cnamgs_number", "picture", "nfc_uid", "qr_code",
)


def _check_status(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in STUDENT_STATUSES:
        raise ValueError(f"Invalid status. Accepted values: {sorted(STUDENT_STATUSES)}")
    return v


class StudentCreate(BaseModel):
    """Création d'un élève. school_id est ignoré pour un compte auto-école."""
    first_name: str
    last_name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    birth_country: Optional[str] = None
    address: Optional[str] = None
    school_id: Optional[int] = None
    status: Optional[str] = None
    nip: Optional[str] = None
    cnss_number: Optional[str] = None
    cnamgs_number: Optional[str] = None
    picture: Optional[str] = None
    nfc_uid: Optional[str] = None
    qr_code: Optional[str] = None

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        return require_text(v, info.field_name.replace("_", " "))

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_status(v)


class StudentUpdate(BaseModel):
    """
    Mise à jour partielle d'un élève (PUT /students/{id}).
    Les champs absents ne sont pas modifiés ; le rattachement à l'auto-école n'est pas modifiable.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    birth_country: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None
    nip: Optional[str] = None
    cnss_number: Optional[str] = None
    cnamgs_number: Optional[str] = None
    picture: Optional[str] = None
    nfc_uid: Optional[str] = None
    qr_code: Optional[str] = None

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: Optional[str], info) -> str:
        # Validé uniquement quand le champ est envoyé : null ou "" sont refusés
        return require_text(v, info.field_name.replace("_", " "))

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("status cannot be empty")
        return _check_status(v)


class StudentResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    birth_country: Optional[str] = None
    address: Optional[str] = None
    school_id: Optional[int] = None
    school_name: Optional[str] = None
    status: Optional[str] = None
    nip: Optional[str] = None
    cnss_number: Optional[str] = None
    cnamgs_number: Optional[str] = None
    picture: Optional[str] = None
    nfc_uid: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StudentVerifyRequest(BaseModel):
    """Contrôle d'un QR code scanné : l'élève appartient-il à l'auto-école de l'appelant ?"""
    student_id: int
