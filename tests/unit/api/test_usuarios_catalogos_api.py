"""
Name: Usuarios / Catálogos Endpoint Tests

Responsibilities:
  - User administration is ADMIN-only (401 without session, 403 otherwise)
  - Create / update users with role replacement
  - Catalog listings require a session and return active entries by name
"""

import pytest
from sii_dicri.domain.entities import UserRole

pytestmark = pytest.mark.unit

NEW_USER = {
    "usuario": "perito",
    "primerNombre": "Luis",
    "primerApellido": "Pérez",
    "email": "luis@dicri.test",
    "contrasena": "perito2024",
    "roles": [1],
}


@pytest.fixture
def admin(seed_user, auth_headers):
    return auth_headers(seed_user("admin", roles=(UserRole.ADMIN,)))


class TestUsuarios:
    def test_requires_admin(self, client, seed_user, auth_headers):
        tecnico = auth_headers(seed_user("tecnico"))

        assert client.get("/usuarios").status_code == 401

        response = client.get("/usuarios", headers=tecnico)
        assert response.status_code == 403
        assert response.json()["codigo"] == "FORBIDDEN"

    def test_roles_catalog(self, client, admin):
        response = client.get("/usuarios/roles", headers=admin)

        assert response.status_code == 200
        assert [r["nombre"] for r in response.json()["roles"]] == [
            "TECNICO",
            "COORDINADOR",
            "ADMIN",
        ]

    def test_create_then_login(self, client, admin):
        response = client.post("/usuarios", json=NEW_USER, headers=admin)

        assert response.status_code == 201
        user_id = response.json()["idUsuario"]

        listed = client.get("/usuarios", params={"search": "luis"}, headers=admin)
        usuarios = listed.json()["usuarios"]
        assert [u["idUsuario"] for u in usuarios] == [user_id]
        assert usuarios[0]["roles"] == ["TECNICO"]
        assert usuarios[0]["idsRoles"] == [1]

        login = client.post(
            "/auth/login", json={"usuario": "perito", "contrasena": "perito2024"}
        )
        assert login.status_code == 200

    def test_create_duplicate_is_400(self, client, admin):
        client.post("/usuarios", json=NEW_USER, headers=admin)

        response = client.post("/usuarios", json=NEW_USER, headers=admin)

        assert response.status_code == 400
        assert response.json()["codigo"] == "CONFLICT"

    def test_create_without_roles(self, client, admin):
        response = client.post(
            "/usuarios", json={**NEW_USER, "roles": []}, headers=admin
        )

        assert response.status_code == 400
        assert response.json()["mensaje"] == "Debe asignar al menos un rol"

    def test_update_replaces_roles_and_deactivates(self, client, admin):
        user_id = client.post("/usuarios", json=NEW_USER, headers=admin).json()[
            "idUsuario"
        ]

        response = client.put(
            f"/usuarios/{user_id}",
            json={
                "primerNombre": "Luis",
                "primerApellido": "Pérez",
                "email": "luis@dicri.test",
                "activo": False,
                "roles": [2],
            },
            headers=admin,
        )
        assert response.status_code == 200

        inactivos = client.get(
            "/usuarios", params={"estado": "Inactivos"}, headers=admin
        ).json()["usuarios"]
        assert [u["usuario"] for u in inactivos] == ["perito"]
        assert inactivos[0]["roles"] == ["COORDINADOR"]

        login = client.post(
            "/auth/login", json={"usuario": "perito", "contrasena": "perito2024"}
        )
        assert login.status_code == 401

    def test_update_unknown_user_is_404(self, client, admin):
        response = client.put(
            "/usuarios/999",
            json={
                "primerNombre": "A",
                "primerApellido": "B",
                "email": "a@b.c",
                "activo": True,
                "roles": [1],
            },
            headers=admin,
        )
        assert response.status_code == 404

    def test_update_requires_activo(self, client, admin):
        user_id = client.post("/usuarios", json=NEW_USER, headers=admin).json()[
            "idUsuario"
        ]
        client.put(
            f"/usuarios/{user_id}",
            json={
                "primerNombre": "Luis",
                "primerApellido": "Pérez",
                "email": "luis@dicri.test",
                "activo": False,
                "roles": [2],
            },
            headers=admin,
        )

        response = client.put(
            f"/usuarios/{user_id}",
            json={
                "primerNombre": "Luis",
                "primerApellido": "Pérez",
                "email": "luis@dicri.test",
                "roles": [2],
            },
            headers=admin,
        )

        assert response.status_code == 400
        assert response.json()["codigo"] == "VALIDATION_ERROR"
        inactivos = client.get(
            "/usuarios", params={"estado": "Inactivos"}, headers=admin
        ).json()["usuarios"]
        assert [u["usuario"] for u in inactivos] == ["perito"]

    def test_invalid_estado_filter(self, client, admin):
        response = client.get("/usuarios", params={"estado": "Todos?"}, headers=admin)
        assert response.status_code == 400


class TestCatalogos:
    def test_requires_session(self, client):
        assert client.get("/catalogos/fiscalias").status_code == 401
        assert client.get("/catalogos/tipos-caso").status_code == 401

    def test_fiscalias(self, client, seed_user, auth_headers):
        headers = auth_headers(seed_user("tecnico"))

        response = client.get("/catalogos/fiscalias", headers=headers)

        assert response.status_code == 200
        nombres = [f["nombre"] for f in response.json()["fiscalias"]]
        assert nombres == sorted(nombres)
        assert "idFiscalia" in response.json()["fiscalias"][0]

    def test_tipos_caso(self, client, seed_user, auth_headers):
        headers = auth_headers(seed_user("coord", roles=(UserRole.COORDINADOR,)))

        response = client.get("/catalogos/tipos-caso", headers=headers)

        assert response.status_code == 200
        tipos = response.json()["tiposCaso"]
        assert {t["nombre"] for t in tipos} == {"Homicidio", "Robo", "Lesiones"}
