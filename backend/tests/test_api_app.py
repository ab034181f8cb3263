"""
Tests transverses de l'application : santé, format des erreurs, erreur interne.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from app.bootstrap import init_db
from app.database import get_db
from app.dependencies import get_current_user
from app.main import app
from app.models.user import User

from conftest import ADMIN


def test_health(anon_client):
    response = anon_client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["message"] == "Server is running"
    assert "timestamp" in data


def test_erreur_validation_en_400(client):
    response = client.post("/api/dossiers", json={"student_id": "pas-un-nombre"})

    assert response.status_code == 400
    assert isinstance(response.json()["detail"], list)


def test_erreur_interne_en_500(mock_db):
    """Une exception imprévue renvoie un message générique sans détail interne."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: ADMIN
    try:
        with patch("app.main.init_db"), patch("app.main.dispose_engine"), \
                patch("app.routers.dossiers.dossier_service.get_dossiers") as mock_get:
            mock_get.side_effect = RuntimeError("connexion perdue")
            with TestClient(app, raise_server_exceptions=False) as c:
                response = c.get("/api/dossiers")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_route_inconnue(client):
    assert client.get("/api/inconnu").status_code == 404


def test_init_db_cree_le_compte_admin(db_session):
    """init_db crée le schéma puis le compte admin par défaut, une seule fois."""
    engine = db_session.get_bind()
    with patch("app.bootstrap.engine", engine), patch("app.bootstrap.SessionLocal", return_value=db_session):
        init_db()
        init_db()

    admins = db_session.query(User).filter(User.username == "admin").all()
    assert len(admins) == 1
    assert admins[0].role == "admin"
    assert admins[0].school_id is None
