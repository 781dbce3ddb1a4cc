"""
===============================================================================
USE CASE: Create Indicio
===============================================================================

Business Goal:
    Agregar un indicio a un expediente mientras el expediente esté dentro de
    su ventana de edición (BORRADOR / RECHAZADO) y el actor sea TECNICO/ADMIN.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    CreateIndicioUseCase

Responsibilities:
    - Validar expediente + nombre obligatorios y normalizar el peso.
    - Pre-validar la regla de edición del expediente padre.
    - Persistir (el repositorio re-chequea con el padre bloqueado).

Collaborators:
    - ExpedienteRepository.get_expediente / create_indicio
    - domain.expediente_workflow.check_editable
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from ....crosscutting.logger import logger
from ....domain.errors import DomainRuleViolation, ExpedienteNotFoundError
from ....domain.expediente_workflow import check_editable
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from ..expedientes.expediente_results import (
    CreateIndicioResult,
    ExpedienteError,
    validation_error,
)
from .indicio_input import IndicioInput

MSG_REQUIRED = "Id del expediente y nombre del indicio son obligatorios."


class CreateIndicioUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(
        self,
        expediente_id: Optional[int],
        data: IndicioInput,
        actor: SessionIdentity,
    ) -> CreateIndicioResult:
        if not expediente_id or not (data.nombre or "").strip():
            return CreateIndicioResult(error=validation_error(MSG_REQUIRED))

        try:
            indicio_data = data.to_data()
        except ValueError as exc:
            return CreateIndicioResult(error=validation_error(str(exc)))

        try:
            expediente = self._expedientes.get_expediente(expediente_id)
            if expediente is None:
                raise ExpedienteNotFoundError()
            check_editable(expediente.estado, actor.roles)
            indicio_id = self._expedientes.create_indicio(
                expediente_id, indicio_data, actor.user_id
            )
        except DomainRuleViolation as exc:
            return CreateIndicioResult(error=ExpedienteError.from_violation(exc))

        logger.info(
            "Indicio creado",
            extra={"expediente_id": expediente_id, "indicio_id": indicio_id},
        )
        return CreateIndicioResult(indicio_id=indicio_id)
