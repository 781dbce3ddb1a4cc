"""
Name: Expedientes / Indicios Endpoint Tests

Responsibilities:
  - Full workflow over HTTP: create -> REVISION -> APROBADO / RECHAZADO
  - Role and state checks mapped to 403 / 400 / 404 envelopes
  - Indicio lifecycle inside the expediente edit window
  - Listing filters by estado and fecha_hecho range
"""

import pytest
from sii_dicri.domain.entities import UserRole

pytestmark = pytest.mark.unit

EXPEDIENTE_BODY = {
    "descripcion": "Robo a mano armada en zona 1",
    "idFiscalia": 1,
    "idTipoCaso": 2,
    "fechaHecho": "2024-05-01",
}


@pytest.fixture
def tecnico(seed_user, auth_headers):
    return auth_headers(seed_user("tecnico", roles=(UserRole.TECNICO,)))


@pytest.fixture
def coordinador(seed_user, auth_headers):
    return auth_headers(seed_user("coord", roles=(UserRole.COORDINADOR,)))


def _create(client, headers, **overrides) -> int:
    response = client.post(
        "/expedientes", json={**EXPEDIENTE_BODY, **overrides}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["idExpediente"]


def _estado(client, headers, expediente_id, nuevo_estado, justificacion=None):
    body = {"nuevoEstado": nuevo_estado}
    if justificacion is not None:
        body["justificacion"] = justificacion
    return client.put(
        f"/expedientes/{expediente_id}/estado", json=body, headers=headers
    )


def _detail(client, headers, expediente_id) -> dict:
    response = client.get(f"/expedientes/{expediente_id}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestCreateAndRead:
    def test_create_starts_in_borrador(self, client, tecnico):
        response = client.post("/expedientes", json=EXPEDIENTE_BODY, headers=tecnico)

        assert response.status_code == 201
        body = response.json()
        assert body["numeroExpediente"].startswith("EXP-")

        detail = _detail(client, tecnico, body["idExpediente"])
        assert detail["expediente"]["estado"] == "BORRADOR"
        assert detail["expediente"]["fiscalia"] == "Fiscalía de Distrito Metropolitana"
        assert detail["expediente"]["tipoCaso"] == "Robo"
        assert detail["accionesPermitidas"] == ["REVISION"]
        assert detail["editable"] is True
        assert detail["indicios"] == []

    def test_create_requires_all_fields(self, client, tecnico):
        response = client.post(
            "/expedientes", json={"descripcion": "sin fecha"}, headers=tecnico
        )

        assert response.status_code == 400
        assert response.json()["mensaje"] == "Todos los campos son obligatorios."

    def test_coordinador_cannot_create(self, client, coordinador):
        response = client.post(
            "/expedientes", json=EXPEDIENTE_BODY, headers=coordinador
        )

        assert response.status_code == 403
        assert response.json()["codigo"] == "FORBIDDEN"

    def test_unknown_catalog_entry_is_400(self, client, tecnico):
        response = client.post(
            "/expedientes", json={**EXPEDIENTE_BODY, "idFiscalia": 99}, headers=tecnico
        )
        assert response.status_code == 400

    def test_bad_date_is_validation_error(self, client, tecnico):
        response = client.post(
            "/expedientes",
            json={**EXPEDIENTE_BODY, "fechaHecho": "no-es-fecha"},
            headers=tecnico,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["codigo"] == "VALIDATION_ERROR"
        assert body["errores"][0]["campo"].endswith("fechaHecho")

    def test_unknown_id_is_404(self, client, tecnico):
        response = client.get("/expedientes/9999", headers=tecnico)

        assert response.status_code == 404
        assert response.json()["mensaje"] == "Expediente no encontrado."

    def test_requires_session(self, client):
        assert client.get("/expedientes").status_code == 401


class TestWorkflow:
    def test_submit_then_approve(self, client, tecnico, coordinador):
        expediente_id = _create(client, tecnico)

        assert _estado(client, tecnico, expediente_id, "REVISION").status_code == 200

        detail = _detail(client, coordinador, expediente_id)
        assert sorted(detail["accionesPermitidas"]) == ["APROBADO", "RECHAZADO"]
        assert detail["editable"] is False

        assert _estado(client, coordinador, expediente_id, "APROBADO").status_code == 200
        detail = _detail(client, tecnico, expediente_id)
        assert detail["expediente"]["estado"] == "APROBADO"
        assert detail["accionesPermitidas"] == []

    def test_reject_requires_justification(self, client, tecnico, coordinador):
        expediente_id = _create(client, tecnico)
        _estado(client, tecnico, expediente_id, "REVISION")

        response = _estado(client, coordinador, expediente_id, "RECHAZADO", "  ")

        assert response.status_code == 400
        assert _detail(client, tecnico, expediente_id)["expediente"]["estado"] == "REVISION"

    def test_reject_stores_justification_and_resubmit_clears_it(
        self, client, tecnico, coordinador
    ):
        expediente_id = _create(client, tecnico)
        _estado(client, tecnico, expediente_id, "REVISION")

        response = _estado(
            client, coordinador, expediente_id, "RECHAZADO", "Falta cadena de custodia"
        )
        assert response.status_code == 200

        expediente = _detail(client, tecnico, expediente_id)["expediente"]
        assert expediente["estado"] == "RECHAZADO"
        assert expediente["justificacionRechazo"] == "Falta cadena de custodia"

        assert _estado(client, tecnico, expediente_id, "REVISION").status_code == 200
        expediente = _detail(client, tecnico, expediente_id)["expediente"]
        assert expediente["justificacionRechazo"] is None

    def test_tecnico_cannot_approve(self, client, tecnico):
        expediente_id = _create(client, tecnico)
        _estado(client, tecnico, expediente_id, "REVISION")

        response = _estado(client, tecnico, expediente_id, "APROBADO")

        assert response.status_code == 403

    def test_invalid_transition_is_400(self, client, tecnico, coordinador):
        expediente_id = _create(client, tecnico)

        response = _estado(client, coordinador, expediente_id, "APROBADO")

        assert response.status_code == 400
        assert _detail(client, tecnico, expediente_id)["expediente"]["estado"] == "BORRADOR"

    def test_unknown_estado_value(self, client, tecnico):
        expediente_id = _create(client, tecnico)

        response = _estado(client, tecnico, expediente_id, "ARCHIVADO")

        assert response.status_code == 400
        assert "Estado inválido" in response.json()["mensaje"]


class TestEditWindow:
    def test_coordinador_cannot_edit(self, client, tecnico, coordinador):
        expediente_id = _create(client, tecnico)

        response = client.put(
            f"/expedientes/{expediente_id}", json=EXPEDIENTE_BODY, headers=coordinador
        )

        assert response.status_code == 403

    def test_tecnico_cannot_edit_in_revision(self, client, tecnico):
        expediente_id = _create(client, tecnico)
        _estado(client, tecnico, expediente_id, "REVISION")

        response = client.put(
            f"/expedientes/{expediente_id}",
            json={**EXPEDIENTE_BODY, "descripcion": "cambio"},
            headers=tecnico,
        )

        assert response.status_code == 400
        assert response.json()["codigo"] == "CONFLICT"

    def test_edit_in_borrador(self, client, tecnico):
        expediente_id = _create(client, tecnico)

        response = client.put(
            f"/expedientes/{expediente_id}",
            json={**EXPEDIENTE_BODY, "descripcion": "Descripción corregida"},
            headers=tecnico,
        )

        assert response.status_code == 200
        expediente = _detail(client, tecnico, expediente_id)["expediente"]
        assert expediente["descripcion"] == "Descripción corregida"
        assert expediente["fechaModificacion"] is not None


class TestIndicios:
    def test_lifecycle(self, client, tecnico):
        expediente_id = _create(client, tecnico)

        created = client.post(
            "/indicios",
            json={
                "idExpediente": expediente_id,
                "nombre": "Casquillo 9mm",
                "color": "dorado",
                "peso": "1,5",
            },
            headers=tecnico,
        )
        assert created.status_code == 201
        indicio_id = created.json()["idIndicio"]

        indicio = _detail(client, tecnico, expediente_id)["indicios"][0]
        assert indicio["nombre"] == "Casquillo 9mm"
        assert indicio["peso"] == 1.5

        updated = client.put(
            f"/indicios/{indicio_id}",
            json={"nombre": "Casquillo 9mm", "peso": 2},
            headers=tecnico,
        )
        assert updated.status_code == 200
        assert _detail(client, tecnico, expediente_id)["indicios"][0]["peso"] == 2.0

        deleted = client.delete(f"/indicios/{indicio_id}", headers=tecnico)
        assert deleted.status_code == 200
        assert _detail(client, tecnico, expediente_id)["indicios"] == []

    def test_invalid_peso(self, client, tecnico):
        expediente_id = _create(client, tecnico)

        response = client.post(
            "/indicios",
            json={"idExpediente": expediente_id, "nombre": "Arma", "peso": "-3"},
            headers=tecnico,
        )

        assert response.status_code == 400

    def test_locked_outside_edit_window(self, client, tecnico):
        expediente_id = _create(client, tecnico)
        _estado(client, tecnico, expediente_id, "REVISION")

        response = client.post(
            "/indicios",
            json={"idExpediente": expediente_id, "nombre": "Arma"},
            headers=tecnico,
        )

        assert response.status_code == 400

    def test_delete_expediente_cascades(self, client, tecnico):
        expediente_id = _create(client, tecnico)
        indicio_id = client.post(
            "/indicios",
            json={"idExpediente": expediente_id, "nombre": "Arma"},
            headers=tecnico,
        ).json()["idIndicio"]

        assert client.delete(f"/expedientes/{expediente_id}", headers=tecnico).status_code == 200

        assert client.get(f"/expedientes/{expediente_id}", headers=tecnico).status_code == 404
        response = client.put(
            f"/indicios/{indicio_id}", json={"nombre": "Arma"}, headers=tecnico
        )
        assert response.status_code == 404


class TestListing:
    def test_filters(self, client, tecnico):
        first = _create(client, tecnico, fechaHecho="2024-01-10")
        _create(client, tecnico, fechaHecho="2024-03-15")
        _estado(client, tecnico, first, "REVISION")

        everything = client.get("/expedientes", headers=tecnico).json()["expedientes"]
        assert len(everything) == 2

        revision = client.get(
            "/expedientes", params={"estado": "REVISION"}, headers=tecnico
        ).json()["expedientes"]
        assert [e["idExpediente"] for e in revision] == [first]

        marzo = client.get(
            "/expedientes",
            params={"fechaInicio": "2024-03-01", "fechaFin": "2024-03-31"},
            headers=tecnico,
        ).json()["expedientes"]
        assert [e["fechaHecho"] for e in marzo] == ["2024-03-15"]

    def test_invalid_estado_filter(self, client, tecnico):
        response = client.get(
            "/expedientes", params={"estado": "CERRADO"}, headers=tecnico
        )

        assert response.status_code == 400
        assert response.json()["codigo"] == "VALIDATION_ERROR"
