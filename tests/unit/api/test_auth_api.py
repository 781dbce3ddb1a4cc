"""
Name: Auth Endpoint Tests

Responsibilities:
  - POST /auth/login: credential checks, token + public identity
  - GET /auth/me: bearer token required, identity echoed back
  - Uniform {ok:false, mensaje, codigo} envelope on failures
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sii_dicri.domain.entities import UserRole
from sii_dicri.identity.auth_users import (
    SESSION_INVALID_MESSAGE,
    decode_access_token,
    get_auth_settings,
)

pytestmark = pytest.mark.unit


def test_login_returns_token_and_identity(client, seed_user):
    seed_user("coord", roles=(UserRole.COORDINADOR, UserRole.TECNICO))

    response = client.post(
        "/auth/login", json={"usuario": "coord", "contrasena": "clave123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["usuario"]["usuario"] == "coord"
    assert body["usuario"]["nombres"] == "Coord Prueba"
    assert sorted(body["usuario"]["roles"]) == ["COORDINADOR", "TECNICO"]

    identity = decode_access_token(body["token"], get_auth_settings())
    assert identity.user_id == body["usuario"]["sub"]


def test_login_wrong_password_is_401(client, seed_user):
    seed_user("admin", roles=(UserRole.ADMIN,))

    response = client.post(
        "/auth/login", json={"usuario": "admin", "contrasena": "wrong"}
    )

    assert response.status_code == 401
    body = response.json()
    assert body["ok"] is False
    assert body["mensaje"] == "Credenciales inválidas"
    assert body["codigo"] == "UNAUTHORIZED"
    assert "token" not in body


def test_login_unknown_user_is_indistinguishable(client):
    response = client.post(
        "/auth/login", json={"usuario": "fantasma", "contrasena": "clave123"}
    )
    assert response.status_code == 401
    assert response.json()["mensaje"] == "Credenciales inválidas"


def test_login_missing_fields_is_400(client):
    response = client.post("/auth/login", json={"usuario": "admin"})

    assert response.status_code == 400
    assert response.json()["mensaje"] == "Usuario y contraseña son obligatorios."


def test_login_accepts_legacy_plaintext_password(client, seed_user):
    seed_user("viejo", password_hash="secreto1")

    response = client.post(
        "/auth/login", json={"usuario": "viejo", "contrasena": "secreto1"}
    )
    assert response.status_code == 200


def test_login_rejects_legacy_plaintext_when_disabled(client, seed_user, monkeypatch):
    from sii_dicri.crosscutting.config import get_settings

    monkeypatch.setenv("ALLOW_LEGACY_PLAINTEXT_PASSWORDS", "false")
    get_settings.cache_clear()
    seed_user("viejo", password_hash="secreto1")

    response = client.post(
        "/auth/login", json={"usuario": "viejo", "contrasena": "secreto1"}
    )
    assert response.status_code == 401


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["mensaje"] == SESSION_INVALID_MESSAGE


def test_me_rejects_garbage_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["mensaje"] == SESSION_INVALID_MESSAGE


def test_me_401_does_not_reveal_token_problem(client, seed_user):
    user = seed_user("tecnico")
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {
            "sub": str(user.id),
            "usuario": user.usuario,
            "roles": ["TECNICO"],
            "iat": int((now - timedelta(hours=2)).timestamp()),
            "exp": int((now - timedelta(hours=1)).timestamp()),
        },
        get_auth_settings().jwt_secret,
        algorithm="HS256",
    )

    bodies = [
        client.get("/auth/me").json(),
        client.get("/auth/me", headers={"Authorization": "Bearer nope"}).json(),
        client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"}).json(),
    ]

    assert {(b["mensaje"], b["codigo"]) for b in bodies} == {
        (SESSION_INVALID_MESSAGE, "UNAUTHORIZED")
    }


def test_me_returns_session_identity(client, seed_user, auth_headers):
    user = seed_user("tecnico")

    response = client.get("/auth/me", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["usuario"] == {
        "sub": user.id,
        "usuario": "tecnico",
        "nombres": "Tecnico Prueba",
        "roles": ["TECNICO"],
    }
