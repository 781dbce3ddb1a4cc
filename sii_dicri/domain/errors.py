"""
===============================================================================
TARJETA CRC — domain/errors.py
===============================================================================

Módulo:
    Violaciones de reglas de negocio

Responsabilidades:
    - Representar cada regla rota con un código estable (RuleErrorCode)
      y un mensaje para el usuario final (en español, tal cual se muestra).
    - Ser lanzadas tanto por la política (capa de aplicación) como por los
      repositorios al re-validar dentro de la transacción.

Colaboradores:
    - domain.expediente_workflow (lanza errores de transición/edición)
    - infrastructure.repositories.* (re-chequeo bajo lock, unicidad)
    - application.usecases.* (las capturan y devuelven resultados tipados)
===============================================================================
"""

from __future__ import annotations

from enum import Enum


class RuleErrorCode(str, Enum):
    """
    Códigos estables (no mensajes):
      - VALIDATION_ERROR: input inválido o incompleto.
      - FORBIDDEN: el rol del actor no permite la operación.
      - NOT_FOUND: entidad inexistente o eliminada.
      - CONFLICT: la operación choca con el estado actual (transición
        inválida, expediente no editable, usuario duplicado).
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


class DomainRuleViolation(Exception):
    code: RuleErrorCode = RuleErrorCode.CONFLICT
    default_message: str = "Operación no permitida."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Workflow de expedientes
# ---------------------------------------------------------------------------


class InvalidTransitionError(DomainRuleViolation):
    code = RuleErrorCode.CONFLICT

    def __init__(self, origen: str, destino: str):
        super().__init__(
            f"No se permite cambiar el estado de {origen} a {destino}."
        )
        self.origen = origen
        self.destino = destino


class TransitionForbiddenError(DomainRuleViolation):
    code = RuleErrorCode.FORBIDDEN

    def __init__(self, origen: str, destino: str):
        super().__init__(
            f"Su rol no permite cambiar el estado de {origen} a {destino}."
        )
        self.origen = origen
        self.destino = destino


class JustificationRequiredError(DomainRuleViolation):
    code = RuleErrorCode.VALIDATION_ERROR
    default_message = "Debe indicar la justificación del rechazo."


class ExpedienteNotEditableError(DomainRuleViolation):
    code = RuleErrorCode.CONFLICT
    default_message = (
        "Solo se pueden modificar expedientes en estado BORRADOR o RECHAZADO."
    )


class EditForbiddenError(DomainRuleViolation):
    code = RuleErrorCode.FORBIDDEN
    default_message = "Su rol no permite modificar expedientes ni indicios."


class PersistenceRuleViolation(DomainRuleViolation):
    """La base rechazó la operación con un mensaje de negocio (se muestra tal cual)."""

    code = RuleErrorCode.CONFLICT


# ---------------------------------------------------------------------------
# Entidades inexistentes / catálogos
# ---------------------------------------------------------------------------


class ExpedienteNotFoundError(DomainRuleViolation):
    code = RuleErrorCode.NOT_FOUND
    default_message = "Expediente no encontrado."


class IndicioNotFoundError(DomainRuleViolation):
    code = RuleErrorCode.NOT_FOUND
    default_message = "Indicio no encontrado."


class UserNotFoundError(DomainRuleViolation):
    code = RuleErrorCode.NOT_FOUND
    default_message = "Usuario no encontrado."


class CatalogEntryNotFoundError(DomainRuleViolation):
    code = RuleErrorCode.VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Usuarios
# ---------------------------------------------------------------------------


class DuplicateUsernameError(DomainRuleViolation):
    code = RuleErrorCode.CONFLICT
    default_message = "Ya existe un usuario activo con ese nombre de usuario."


class UnknownRoleError(DomainRuleViolation):
    code = RuleErrorCode.VALIDATION_ERROR
    default_message = "Uno o más roles no existen o están inactivos."
