"""
USE CASE: Update Indicio.

Reemplaza los atributos del indicio. Misma regla de edición que el
expediente padre; el repositorio re-chequea con el padre bloqueado.
"""

from __future__ import annotations

from ....domain.errors import (
    DomainRuleViolation,
    ExpedienteNotFoundError,
    IndicioNotFoundError,
)
from ....domain.expediente_workflow import check_editable
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from ..expedientes.expediente_results import (
    CommandResult,
    ExpedienteError,
    validation_error,
)
from .indicio_input import IndicioInput

MSG_NOMBRE_REQUIRED = "El nombre del indicio es obligatorio."


def check_parent_editable(
    expedientes: ExpedienteRepository, indicio_id: int, actor: SessionIdentity
) -> None:
    """Raises DomainRuleViolation si el indicio o su padre no admiten cambios."""
    indicio = expedientes.get_indicio(indicio_id)
    if indicio is None:
        raise IndicioNotFoundError()
    expediente = expedientes.get_expediente(indicio.id_expediente)
    if expediente is None:
        raise ExpedienteNotFoundError()
    check_editable(expediente.estado, actor.roles)


class UpdateIndicioUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(
        self, indicio_id: int, data: IndicioInput, actor: SessionIdentity
    ) -> CommandResult:
        if not (data.nombre or "").strip():
            return CommandResult.failure(validation_error(MSG_NOMBRE_REQUIRED))

        try:
            indicio_data = data.to_data()
        except ValueError as exc:
            return CommandResult.failure(validation_error(str(exc)))

        try:
            check_parent_editable(self._expedientes, indicio_id, actor)
            self._expedientes.update_indicio(indicio_id, indicio_data, actor.user_id)
        except DomainRuleViolation as exc:
            return CommandResult.failure(ExpedienteError.from_violation(exc))

        return CommandResult(ok=True)
