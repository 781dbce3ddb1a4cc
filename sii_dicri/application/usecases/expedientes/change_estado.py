"""
===============================================================================
USE CASE: Change Expediente Estado (workflow)
===============================================================================

Name:
    Change Estado Use Case

Business Goal:
    Mover un expediente por la máquina de estados:
        BORRADOR  -> REVISION   (TECNICO, ADMIN)
        RECHAZADO -> REVISION   (TECNICO, ADMIN)
        REVISION  -> APROBADO   (COORDINADOR, ADMIN)
        REVISION  -> RECHAZADO  (COORDINADOR, ADMIN, con justificación)

Why (Context / Intención):
    - La validación previa evita ir a la base con pedidos que igual van a
      fallar; el repositorio vuelve a evaluar con la fila bloqueada y con los
      roles almacenados, y ese resultado es el definitivo.
    - Cualquier fallo deja el estado sin cambios.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ChangeEstadoUseCase

Responsibilities:
    - Parsear el estado destino.
    - Pre-validar par / rol / justificación contra el estado actual.
    - Persistir la transición y registrar la métrica de resultado.

Collaborators:
    - domain.expediente_workflow.check_transition
    - ExpedienteRepository.change_estado
    - crosscutting.metrics.record_transition
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_transition
from ....domain.errors import DomainRuleViolation, ExpedienteNotFoundError
from ....domain.expediente_workflow import check_transition
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from .expediente_results import CommandResult, ExpedienteError, validation_error
from .list_expedientes import parse_estado

RESULT_OK = "ok"


class ChangeEstadoUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(
        self,
        expediente_id: int,
        nuevo_estado: Optional[str],
        actor: SessionIdentity,
        *,
        justificacion: Optional[str] = None,
    ) -> CommandResult:
        try:
            destino = parse_estado(nuevo_estado)
        except ValueError:
            return CommandResult.failure(
                validation_error(f"Estado inválido: {nuevo_estado}.")
            )
        if destino is None:
            return CommandResult.failure(
                validation_error("Debe indicar el nuevo estado.")
            )

        expediente = self._expedientes.get_expediente(expediente_id)
        if expediente is None:
            return CommandResult.failure(
                ExpedienteError.from_violation(ExpedienteNotFoundError())
            )

        origen = expediente.estado
        try:
            check_transition(origen, destino, actor.roles, justificacion)
            change = self._expedientes.change_estado(
                expediente_id, destino, justificacion, actor.user_id
            )
        except DomainRuleViolation as exc:
            record_transition(origen.value, destino.value, exc.code.value.lower())
            logger.info(
                "Transición rechazada",
                extra={
                    "expediente_id": expediente_id,
                    "origen": origen.value,
                    "destino": destino.value,
                    "motivo": exc.code.value,
                },
            )
            return CommandResult.failure(ExpedienteError.from_violation(exc))

        record_transition(change.origen.value, change.destino.value, RESULT_OK)
        logger.info(
            "Estado de expediente actualizado",
            extra={
                "expediente_id": expediente_id,
                "origen": change.origen.value,
                "destino": change.destino.value,
            },
        )
        return CommandResult(ok=True)

