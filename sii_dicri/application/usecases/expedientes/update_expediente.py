"""
===============================================================================
USE CASE: Update Expediente (campos núcleo)
===============================================================================

Business Goal:
    Modificar descripción, fiscalía, tipo de caso y fecha del hecho mientras
    el expediente esté en BORRADOR o RECHAZADO y el actor sea TECNICO/ADMIN.

Reglas:
    - Todos los campos son obligatorios (reemplazo completo).
    - La regla de edición se evalúa acá (fail fast) y otra vez en el
      repositorio con el expediente bloqueado.
===============================================================================
"""

from __future__ import annotations

from ....domain.errors import DomainRuleViolation, ExpedienteNotFoundError
from ....domain.expediente_workflow import check_editable
from ....domain.repositories import CatalogRepository, ExpedienteRepository
from ....identity.users import SessionIdentity
from .create_expediente import (
    MSG_REQUIRED_FIELDS,
    ExpedienteInput,
    resolve_expediente_data,
)
from .expediente_results import CommandResult, ExpedienteError, validation_error


class UpdateExpedienteUseCase:
    def __init__(
        self,
        expediente_repository: ExpedienteRepository,
        catalog_repository: CatalogRepository,
    ) -> None:
        self._expedientes = expediente_repository
        self._catalogs = catalog_repository

    def execute(
        self, expediente_id: int, data: ExpedienteInput, actor: SessionIdentity
    ) -> CommandResult:
        if data.missing_required():
            return CommandResult.failure(validation_error(MSG_REQUIRED_FIELDS))

        try:
            expediente = self._expedientes.get_expediente(expediente_id)
            if expediente is None:
                raise ExpedienteNotFoundError()
            check_editable(expediente.estado, actor.roles)

            resolved = resolve_expediente_data(data, self._catalogs)
            self._expedientes.update_expediente(expediente_id, resolved, actor.user_id)
        except DomainRuleViolation as exc:
            return CommandResult.failure(ExpedienteError.from_violation(exc))

        return CommandResult(ok=True)
