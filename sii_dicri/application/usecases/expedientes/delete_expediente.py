"""
===============================================================================
USE CASE: Delete Expediente (soft delete con cascada)
===============================================================================

Business Goal:
    Desactivar un expediente y, en la misma transacción, todos sus indicios
    activos. Nunca borra filas.

Reglas:
    - Misma ventana que la edición: BORRADOR o RECHAZADO, actor TECNICO/ADMIN.
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.logger import logger
from ....domain.errors import DomainRuleViolation, ExpedienteNotFoundError
from ....domain.expediente_workflow import check_editable
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from .expediente_results import CommandResult, ExpedienteError


class DeleteExpedienteUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(self, expediente_id: int, actor: SessionIdentity) -> CommandResult:
        try:
            expediente = self._expedientes.get_expediente(expediente_id)
            if expediente is None:
                raise ExpedienteNotFoundError()
            check_editable(expediente.estado, actor.roles)
            cascaded = self._expedientes.delete_expediente(expediente_id, actor.user_id)
        except DomainRuleViolation as exc:
            return CommandResult.failure(ExpedienteError.from_violation(exc))

        logger.info(
            "Expediente eliminado",
            extra={"expediente_id": expediente_id, "indicios_desactivados": cascaded},
        )
        return CommandResult(ok=True, cascaded=cascaded)
