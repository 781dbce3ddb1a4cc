"""
===============================================================================
USE CASE: Get Expediente (detalle + indicios + acciones)
===============================================================================

Business Goal:
    Devolver el expediente, sus indicios activos y qué puede hacer el actor
    sobre él (transiciones disponibles y si puede editar), de modo que el
    frontend no replique reglas del workflow.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    GetExpedienteUseCase

Collaborators:
    - ExpedienteRepository.get_expediente / list_indicios
    - domain.expediente_workflow.allowed_transitions / can_edit
===============================================================================
"""

from __future__ import annotations

from ....domain.errors import ExpedienteNotFoundError
from ....domain.expediente_workflow import allowed_transitions, can_edit
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from .expediente_results import ExpedienteDetailResult, ExpedienteError


class GetExpedienteUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(
        self, expediente_id: int, actor: SessionIdentity
    ) -> ExpedienteDetailResult:
        expediente = self._expedientes.get_expediente(expediente_id)
        if expediente is None:
            return ExpedienteDetailResult(
                error=ExpedienteError.from_violation(ExpedienteNotFoundError())
            )

        return ExpedienteDetailResult(
            expediente=expediente,
            indicios=self._expedientes.list_indicios(expediente_id),
            acciones=allowed_transitions(expediente.estado, actor.roles),
            editable=can_edit(expediente.estado, actor.roles),
        )
