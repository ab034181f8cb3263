"""
Modèle SQLAlchemy pour les centres d'examen (indépendants du suivi des dossiers).
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from app.database import Base


class ExamCenter(Base):
    __tablename__ = "exam_centers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
