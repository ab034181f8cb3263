"""
Modèle SQLAlchemy pour la table students.
Identité, rattachement à une auto-école et identifiants physiques (photo, NFC, QR).
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, func

from app.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    birth_country = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=True)
    status = Column(String(50), default="active")  # active, inactive

    # Identifiants nationaux
    nip = Column(String(50), nullable=True)
    cnss_number = Column(String(50), nullable=True)
    cnamgs_number = Column(String(50), nullable=True)

    picture = Column(Text, nullable=True)
    nfc_uid = Column(String(50), unique=True, nullable=True)
    qr_code = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
