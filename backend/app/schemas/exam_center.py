"""
Schémas Pydantic pour les centres d'examen.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.common import blank_to_none, require_text


class ExamCenterCreate(BaseModel):
    name: str
    address: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("address", "contact_person", "phone", "email", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return require_text(v, "Exam center name")


class ExamCenterUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("address", "contact_person", "phone", "email", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> str:
        return require_text(v, "Exam center name")


class ExamCenterResponse(BaseModel):
    id: int
    name: str
    address: Optional[str]
    contact_person: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
