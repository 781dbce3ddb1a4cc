"""
===============================================================================
EXPEDIENTE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Expediente / Indicio Use Case Results

Business Goal:
    Modelos compartidos de resultado y error para los casos de uso de
    expedientes e indicios, con un contrato estable para:
      - validaciones
      - autorización por rol
      - recursos no encontrados
      - conflictos de workflow (transición inválida, estado no editable)

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar
      excepciones de negocio hacia afuera; el router mapea código -> HTTP.
    - Las violaciones lanzadas por el workflow o por el repositorio (re-chequeo
      bajo lock) se convierten en ExpedienteError con el mismo mensaje.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    expediente_results models (module)

Responsibilities:
    - Representar ExpedienteError (code + message).
    - Representar resultados por tipo de operación (lista, detalle, creación,
      comandos sin payload).
    - Traducir DomainRuleViolation -> ExpedienteError.

Collaborators:
    - domain.errors.RuleErrorCode / DomainRuleViolation
    - domain.entities.Expediente / Indicio / EstadoExpediente
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ....domain.entities import EstadoExpediente, Expediente, Indicio
from ....domain.errors import DomainRuleViolation, RuleErrorCode

# Mismo set de códigos que el dominio: las violaciones viajan sin re-mapear.
ExpedienteErrorCode = RuleErrorCode


@dataclass(frozen=True)
class ExpedienteError:
    """
    Error de caso de uso.

    Campos:
      - code: categoría estable (VALIDATION_ERROR, FORBIDDEN, NOT_FOUND, CONFLICT)
      - message: texto que ve el usuario final, tal cual
    """

    code: ExpedienteErrorCode
    message: str

    @classmethod
    def from_violation(cls, exc: DomainRuleViolation) -> "ExpedienteError":
        return cls(code=exc.code, message=exc.message)


def validation_error(message: str) -> ExpedienteError:
    return ExpedienteError(code=ExpedienteErrorCode.VALIDATION_ERROR, message=message)


@dataclass
class ExpedienteListResult:
    expedientes: List[Expediente] = field(default_factory=list)
    error: ExpedienteError | None = None


@dataclass
class ExpedienteDetailResult:
    """
    Detalle: expediente + indicios activos + acciones disponibles del actor.

    `acciones` son los estados destino que el actor puede solicitar desde el
    estado actual; `editable` indica si puede modificar campos e indicios.
    """

    expediente: Expediente | None = None
    indicios: List[Indicio] = field(default_factory=list)
    acciones: List[EstadoExpediente] = field(default_factory=list)
    editable: bool = False
    error: ExpedienteError | None = None


@dataclass
class CreateExpedienteResult:
    expediente: Expediente | None = None
    error: ExpedienteError | None = None


@dataclass
class CreateIndicioResult:
    indicio_id: int | None = None
    error: ExpedienteError | None = None


@dataclass
class CommandResult:
    """
    Resultado de comandos sin payload (update / cambio de estado / delete).

    Nota:
      - `cascaded` solo aplica al soft delete de expedientes (indicios
        desactivados en la misma transacción).
    """

    ok: bool = False
    cascaded: int = 0
    error: ExpedienteError | None = None

    @classmethod
    def failure(cls, error: ExpedienteError) -> "CommandResult":
        return cls(ok=False, error=error)
