"""
Tests d'intégration API pour la gestion des comptes (admin uniquement, service mocké).
"""

from datetime import datetime
from unittest.mock import patch

from app.exceptions import BadRequestError, ConflictError
from app.models.user import UserRole
from app.schemas.user import UserResponse


def make_user(**kwargs) -> UserResponse:
    return UserResponse(
        id=kwargs.get("id", 5),
        username=kwargs.get("username", "ecole-a"),
        role=kwargs.get("role", UserRole.SCHOOL),
        school_id=kwargs.get("school_id", 1),
        school_name=kwargs.get("school_name", "Auto-école A"),
        created_at=datetime(2024, 1, 10, 8, 0),
    )


def test_list_users(client):
    with patch("app.routers.users.user_service.get_users") as mock_get:
        mock_get.return_value = [make_user()]
        response = client.get("/api/users")

    assert response.status_code == 200
    user = response.json()[0]
    assert user["username"] == "ecole-a"
    assert user["school_name"] == "Auto-école A"
    assert "password" not in user


def test_list_users_compte_ecole_refuse(school_client):
    response = school_client.get("/api/users")
    assert response.status_code == 403


def test_list_users_agent_refuse(agent_client):
    response = agent_client.get("/api/users")
    assert response.status_code == 403


def test_create_user(client):
    with patch("app.routers.users.user_service.create_user") as mock_create:
        mock_create.return_value = make_user(id=8)
        response = client.post("/api/users", json={
            "username": "ecole-a", "password": "secret", "role": "school", "school_id": 1,
        })

    assert response.status_code == 201
    assert response.json()["id"] == 8
    data = mock_create.call_args.args[1]
    assert data.role is UserRole.SCHOOL


def test_create_user_role_par_defaut_school(client):
    with patch("app.routers.users.user_service.create_user") as mock_create:
        mock_create.return_value = make_user()
        client.post("/api/users", json={"username": "ecole-a", "password": "secret", "school_id": 1})
    assert mock_create.call_args.args[1].role is UserRole.SCHOOL


def test_create_user_role_inconnu(client):
    response = client.post("/api/users", json={"username": "x", "password": "y", "role": "superuser"})
    assert response.status_code == 400


def test_create_user_sans_ecole(client):
    with patch("app.routers.users.user_service.create_user") as mock_create:
        mock_create.side_effect = BadRequestError("school_id is required for school accounts")
        response = client.post("/api/users", json={"username": "x", "password": "y", "role": "school"})
    assert response.status_code == 400


def test_create_user_doublon(client):
    with patch("app.routers.users.user_service.create_user") as mock_create:
        mock_create.side_effect = ConflictError("Username already exists")
        response = client.post("/api/users", json={"username": "admin", "password": "y", "role": "admin"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


def test_update_user_sans_mot_de_passe(client):
    with patch("app.routers.users.user_service.update_user") as mock_update:
        mock_update.return_value = make_user(username="renomme")
        response = client.put("/api/users/5", json={"username": "renomme"})

    assert response.status_code == 200
    assert mock_update.call_args.args[2].model_dump(exclude_unset=True) == {"username": "renomme"}


def test_delete_user(client):
    with patch("app.routers.users.user_service.delete_user") as mock_delete:
        response = client.delete("/api/users/5")
    assert response.status_code == 204
    mock_delete.assert_called_once()
