"""USE CASE: Delete Indicio (soft delete, misma ventana de edición del padre)."""

from __future__ import annotations

from ....domain.errors import DomainRuleViolation
from ....domain.repositories import ExpedienteRepository
from ....identity.users import SessionIdentity
from ..expedientes.expediente_results import CommandResult, ExpedienteError
from .update_indicio import check_parent_editable


class DeleteIndicioUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(self, indicio_id: int, actor: SessionIdentity) -> CommandResult:
        try:
            check_parent_editable(self._expedientes, indicio_id, actor)
            self._expedientes.delete_indicio(indicio_id, actor.user_id)
        except DomainRuleViolation as exc:
            return CommandResult.failure(ExpedienteError.from_violation(exc))
        return CommandResult(ok=True)
