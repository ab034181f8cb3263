"""
Initialisation de la base au démarrage : création des tables et compte admin par défaut.
"""

import logging

import app.models  # noqa: F401 : enregistre tous les modèles dans Base.metadata
from app.database import Base, SessionLocal, engine
from app.services.user_service import ensure_default_admin

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_admin(db)
    finally:
        db.close()
    logger.info("Base de données initialisée")
