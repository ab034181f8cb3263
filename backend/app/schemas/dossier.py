"""
Schémas Pydantic pour les dossiers de permis et leurs étapes.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre le champ `date` et le type `datetime.date` dans Pydantic v2.
"""

import datetime as dt
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.models.dossier import DossierStepName
from app.schemas.common import CAMEL_CONFIG, blank_to_none, require_text


class DossierCreate(BaseModel):
    student_id: int
    license_type: str = "B"

    @field_validator("license_type")
    @classmethod
    def valid_license_type(cls, v: str) -> str:
        v = require_text(v, "License type")
        if len(v) > 10:
            raise ValueError("License type must be at most 10 characters")
        return v


class DossierStepUpdate(BaseModel):
    """Corps de PATCH /dossiers/{id}/step, avec les mêmes clés que le frontend."""
    step: DossierStepName
    completed: bool
    date: Optional[dt.date] = None
    result: Optional[str] = None

    @field_validator("date", "result", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("result")
    @classmethod
    def result_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 10:
            raise ValueError("Result must be at most 10 characters")
        return v


class DossierStepResponse(BaseModel):
    id: int
    step_name: DossierStepName
    step_order: int
    completed: bool
    completion_date: Optional[dt.date] = None
    result: Optional[str] = None

    model_config = {"from_attributes": True}


class DossierResponse(BaseModel):
    id: int
    student_id: int
    student_name: str
    school_id: Optional[int]
    license_type: str
    status: str
    progress: int
    completed_steps: int
    total_steps: int
    steps: Optional[List[DossierStepResponse]] = None  # renseigné uniquement par le détail d'un dossier
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DossierProgressUpdate(BaseModel):
    """Réponse après mise à jour d'une étape."""
    dossier_id: int
    step: DossierStepName
    progress: int
    status: str


class StepProgressItem(BaseModel):
    step_name: DossierStepName
    completed: bool
    completion_date: Optional[dt.date] = None
    result: Optional[str] = None

    model_config = CAMEL_CONFIG


class StudentDossierProgress(BaseModel):
    """Vue « parcours » d'un élève : son dossier le plus récent et ses étapes ordonnées."""
    dossier_id: int
    student_name: str
    license_type: str
    progress: int
    steps: List[StepProgressItem]

    model_config = CAMEL_CONFIG
