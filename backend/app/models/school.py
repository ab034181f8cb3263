"""
Modèle SQLAlchemy pour les auto-écoles.
Une auto-école possède des élèves, des dossiers et des comptes utilisateurs (rôle school).
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.database import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    director_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
