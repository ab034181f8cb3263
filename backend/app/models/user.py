"""
Modèle SQLAlchemy pour les utilisateurs de la plateforme.
"""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from app.database import Base


class UserRole(str, enum.Enum):
    """Rôles autorisés. Un compte SCHOOL est obligatoirement rattaché à une auto-école."""
    ADMIN = "admin"
    SCHOOL = "school"
    DGTT_AGENT = "dgtt_agent"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # hash bcrypt, jamais le mot de passe clair
    role = Column(String(50), nullable=False, default=UserRole.SCHOOL.value)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
