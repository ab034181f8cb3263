"""
Utilitaires partagés par les schémas Pydantic.
"""

from typing import Any

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


def blank_to_none(v: Any) -> Any:
    """Le frontend envoie "" pour un champ laissé vide : on le traite comme absent."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def require_text(v, field_label: str):
    if v is None or not v.strip():
        raise ValueError(f"{field_label} is required")
    return v.strip()


# Réponses d'agrégation consommées telles quelles par les tableaux de bord (clés camelCase)
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)
