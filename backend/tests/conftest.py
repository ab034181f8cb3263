"""
Configuration partagée pour tous les tests.

- client / school_client / anon_client : BDD mockée (MagicMock), appelant injecté
  via dependency_overrides (admin, compte auto-école n°1, ou aucun).
- db_session : vraie session SQLAlchemy sur SQLite en mémoire, pour les tests
  qui ont besoin de SQL réel (progression, contraintes, tri).
- sql_client : client HTTP branché sur db_session, authentification réelle (JWT).
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.dependencies import get_current_user
from app.main import app
from app.models.school import School
from app.models.student import Student
from app.models.user import UserRole
from app.security import CurrentUser

ADMIN = CurrentUser(id=1, username="admin", role=UserRole.ADMIN)
SCHOOL_A = CurrentUser(id=2, username="ecole-a", role=UserRole.SCHOOL, school_id=1)
SCHOOL_B = CurrentUser(id=3, username="ecole-b", role=UserRole.SCHOOL, school_id=2)
DGTT_AGENT = CurrentUser(id=4, username="agent", role=UserRole.DGTT_AGENT)


def _make_client(db, caller):
    app.dependency_overrides[get_db] = lambda: db
    if caller is not None:
        app.dependency_overrides[get_current_user] = lambda: caller
    # Pas de création de schéma PostgreSQL au démarrage pendant les tests
    with patch("app.main.init_db"), patch("app.main.dispose_engine"):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test authentifié en administrateur, BDD mockée."""
    yield from _make_client(mock_db, ADMIN)


@pytest.fixture
def school_client(mock_db):
    """Client HTTP authentifié avec un compte de l'auto-école n°1."""
    yield from _make_client(mock_db, SCHOOL_A)


@pytest.fixture
def agent_client(mock_db):
    yield from _make_client(mock_db, DGTT_AGENT)


@pytest.fixture
def anon_client(mock_db):
    """Client sans override d'authentification : le jeton Bearer est réellement vérifié."""
    yield from _make_client(mock_db, None)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sql_client(db_session):
    yield from _make_client(db_session, None)


@pytest.fixture
def schools(db_session):
    """Deux auto-écoles : A (id 1, celle de SCHOOL_A) et B (id 2, celle de SCHOOL_B)."""
    school_a = School(name="Auto-école A", director_name="M. Ondo")
    school_b = School(name="Auto-école B")
    db_session.add(school_a)
    db_session.flush()
    db_session.add(school_b)
    db_session.commit()
    return school_a, school_b


@pytest.fixture
def student_a(db_session, schools):
    """Élève inscrit dans l'auto-école A."""
    student = Student(first_name="Marie", last_name="Nze", school_id=schools[0].id, status="active")
    db_session.add(student)
    db_session.commit()
    return student
