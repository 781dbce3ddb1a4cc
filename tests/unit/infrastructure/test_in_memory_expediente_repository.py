"""
Name: In-Memory Expediente Repository Tests

Responsibilities:
  - Sequential numbering EXP-<year>-<000001>
  - Workflow re-check with roles loaded from the user store
  - Soft delete cascading to indicios
  - Listing filters and ordering
"""

from datetime import date
from decimal import Decimal

import pytest
from sii_dicri.domain.entities import (
    EstadoExpediente,
    ExpedienteData,
    ExpedienteFilters,
    IndicioData,
    UserRole,
)
from sii_dicri.domain.errors import (
    EditForbiddenError,
    ExpedienteNotEditableError,
    ExpedienteNotFoundError,
    IndicioNotFoundError,
    TransitionForbiddenError,
)
from sii_dicri.infrastructure.repositories import InMemoryExpedienteRepository

pytestmark = pytest.mark.unit

TECNICO_ID = 1
COORD_ID = 2
ROLES = {
    TECNICO_ID: frozenset({UserRole.TECNICO}),
    COORD_ID: frozenset({UserRole.COORDINADOR}),
}


def _data(fecha: date = date(2024, 3, 10)) -> ExpedienteData:
    return ExpedienteData(
        descripcion="Robo en bodega",
        id_fiscalia=1,
        fiscalia="Fiscalía de Distrito Metropolitana",
        id_tipo_caso=2,
        tipo_caso="Robo",
        fecha_hecho=fecha,
    )


@pytest.fixture
def repo():
    return InMemoryExpedienteRepository(
        roles_provider=lambda uid: ROLES.get(uid, frozenset())
    )


def test_create_assigns_sequential_number(repo):
    first = repo.create_expediente(_data(), TECNICO_ID)
    second = repo.create_expediente(_data(), TECNICO_ID)

    year = first.fecha_registro.year
    assert first.numero == f"EXP-{year}-000001"
    assert second.numero == f"EXP-{year}-000002"
    assert first.estado == EstadoExpediente.BORRADOR
    assert first.id_usuario_registro == TECNICO_ID


def test_create_rechecks_role(repo):
    with pytest.raises(EditForbiddenError):
        repo.create_expediente(_data(), COORD_ID)


def test_change_estado_uses_stored_roles(repo):
    exp = repo.create_expediente(_data(), TECNICO_ID)
    change = repo.change_estado(exp.id, EstadoExpediente.REVISION, None, TECNICO_ID)

    assert change.origen == EstadoExpediente.BORRADOR
    assert change.destino == EstadoExpediente.REVISION
    assert repo.get_expediente(exp.id).estado == EstadoExpediente.REVISION

    with pytest.raises(TransitionForbiddenError):
        repo.change_estado(exp.id, EstadoExpediente.APROBADO, None, TECNICO_ID)


def test_reject_then_resubmit_clears_justification(repo):
    exp = repo.create_expediente(_data(), TECNICO_ID)
    repo.change_estado(exp.id, EstadoExpediente.REVISION, None, TECNICO_ID)
    repo.change_estado(exp.id, EstadoExpediente.RECHAZADO, " Falta foto ", COORD_ID)

    rejected = repo.get_expediente(exp.id)
    assert rejected.justificacion_rechazo == "Falta foto"
    assert rejected.id_usuario_modificacion == COORD_ID

    repo.change_estado(exp.id, EstadoExpediente.REVISION, None, TECNICO_ID)
    assert repo.get_expediente(exp.id).justificacion_rechazo is None


def test_update_blocked_outside_editable_states(repo):
    exp = repo.create_expediente(_data(), TECNICO_ID)
    repo.change_estado(exp.id, EstadoExpediente.REVISION, None, TECNICO_ID)

    with pytest.raises(ExpedienteNotEditableError):
        repo.update_expediente(exp.id, _data(), TECNICO_ID)


def test_soft_delete_cascades_to_indicios(repo):
    exp = repo.create_expediente(_data(), TECNICO_ID)
    first = repo.create_indicio(exp.id, IndicioData(nombre="Casquillo"), TECNICO_ID)
    repo.create_indicio(
        exp.id, IndicioData(nombre="Navaja", peso=Decimal("0.25")), TECNICO_ID
    )
    repo.delete_indicio(first, TECNICO_ID)

    cascaded = repo.delete_expediente(exp.id, TECNICO_ID)

    assert cascaded == 1
    assert repo.get_expediente(exp.id) is None
    assert repo.list_indicios(exp.id) == []
    with pytest.raises(ExpedienteNotFoundError):
        repo.delete_expediente(exp.id, TECNICO_ID)


def test_indicio_writes_follow_parent_window(repo):
    exp = repo.create_expediente(_data(), TECNICO_ID)
    indicio_id = repo.create_indicio(exp.id, IndicioData(nombre="Casquillo"), TECNICO_ID)

    with pytest.raises(EditForbiddenError):
        repo.update_indicio(indicio_id, IndicioData(nombre="Otro"), COORD_ID)

    repo.change_estado(exp.id, EstadoExpediente.REVISION, None, TECNICO_ID)
    with pytest.raises(ExpedienteNotEditableError):
        repo.delete_indicio(indicio_id, TECNICO_ID)
    with pytest.raises(IndicioNotFoundError):
        repo.update_indicio(999, IndicioData(nombre="x"), TECNICO_ID)


def test_list_filters_and_ordering(repo):
    older = repo.create_expediente(_data(date(2024, 1, 5)), TECNICO_ID)
    newer = repo.create_expediente(_data(date(2024, 6, 1)), TECNICO_ID)
    repo.change_estado(newer.id, EstadoExpediente.REVISION, None, TECNICO_ID)

    all_items = repo.list_expedientes(ExpedienteFilters())
    assert [e.id for e in all_items] == [newer.id, older.id]

    in_review = repo.list_expedientes(
        ExpedienteFilters(estado=EstadoExpediente.REVISION)
    )
    assert [e.id for e in in_review] == [newer.id]

    by_date = repo.list_expedientes(
        ExpedienteFilters(fecha_inicio=date(2024, 1, 1), fecha_fin=date(2024, 1, 31))
    )
    assert [e.id for e in by_date] == [older.id]
