"""
===============================================================================
TARJETA CRC — domain/expediente_workflow.py
===============================================================================

Módulo:
    Máquina de estados de Expedientes + regla de mutabilidad

Responsabilidades:
    - Declarar la tabla de transiciones permitidas y los roles que habilitan
      cada una (funciones puras, sin DB, sin FastAPI).
    - Decidir si un actor puede editar campos núcleo e indicios según el
      estado actual y sus roles.
    - Exponer qué acciones tiene disponibles un actor sobre un expediente
      (lo usa el detalle para que el frontend no duplique reglas).

Colaboradores:
    - domain.entities.EstadoExpediente / UserRole
    - domain.errors (violaciones tipadas)
    - application.usecases.expedientes / indicios (chequeo previo)
    - infrastructure.repositories.* (re-chequeo bajo lock dentro de la
      transacción; un cliente que saltee la API igual falla)

Reglas:
    BORRADOR  -> REVISION   : TECNICO, ADMIN
    RECHAZADO -> REVISION   : TECNICO, ADMIN
    REVISION  -> APROBADO   : COORDINADOR, ADMIN
    REVISION  -> RECHAZADO  : COORDINADOR, ADMIN (+ justificación no vacía)
    APROBADO es terminal. Cualquier otro par es inválido.

    Edición de campos/indicios: estado ∈ {BORRADOR, RECHAZADO} y el actor
    tiene TECNICO o ADMIN (un COORDINADOR sin otro rol nunca edita).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .entities import EstadoExpediente, UserRole
from .errors import (
    EditForbiddenError,
    ExpedienteNotEditableError,
    InvalidTransitionError,
    JustificationRequiredError,
    TransitionForbiddenError,
)

INITIAL_STATE = EstadoExpediente.BORRADOR

EDITABLE_STATES: frozenset[EstadoExpediente] = frozenset(
    {EstadoExpediente.BORRADOR, EstadoExpediente.RECHAZADO}
)

EDITOR_ROLES: frozenset[UserRole] = frozenset({UserRole.TECNICO, UserRole.ADMIN})
REVIEWER_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.COORDINADOR, UserRole.ADMIN}
)


@dataclass(frozen=True, slots=True)
class Transition:
    origen: EstadoExpediente
    destino: EstadoExpediente
    roles: frozenset[UserRole]
    requires_justification: bool = False


TRANSITIONS: dict[tuple[EstadoExpediente, EstadoExpediente], Transition] = {
    (t.origen, t.destino): t
    for t in (
        Transition(EstadoExpediente.BORRADOR, EstadoExpediente.REVISION, EDITOR_ROLES),
        Transition(EstadoExpediente.RECHAZADO, EstadoExpediente.REVISION, EDITOR_ROLES),
        Transition(EstadoExpediente.REVISION, EstadoExpediente.APROBADO, REVIEWER_ROLES),
        Transition(
            EstadoExpediente.REVISION,
            EstadoExpediente.RECHAZADO,
            REVIEWER_ROLES,
            requires_justification=True,
        ),
    )
}


def has_any_role(roles: Iterable[UserRole], allowed: Iterable[UserRole]) -> bool:
    """Intersección no vacía. Los roles ya vienen normalizados desde la sesión."""
    return not frozenset(roles).isdisjoint(allowed)


def find_transition(
    origen: EstadoExpediente, destino: EstadoExpediente
) -> Optional[Transition]:
    return TRANSITIONS.get((origen, destino))


def check_transition(
    origen: EstadoExpediente,
    destino: EstadoExpediente,
    roles: Iterable[UserRole],
    justificacion: Optional[str] = None,
) -> Optional[str]:
    """
    Valida una transición y devuelve la justificación a persistir.

    Orden de chequeos: par válido -> rol -> justificación.
    La justificación solo sobrevive cuando el destino es RECHAZADO; en
    cualquier otro destino se devuelve None (se limpia al salir de RECHAZADO).
    """
    transition = find_transition(origen, destino)
    if transition is None:
        raise InvalidTransitionError(origen.value, destino.value)

    if not has_any_role(roles, transition.roles):
        raise TransitionForbiddenError(origen.value, destino.value)

    if not transition.requires_justification:
        return None

    normalized = (justificacion or "").strip()
    if not normalized:
        raise JustificationRequiredError()
    return normalized


def can_edit(estado: EstadoExpediente, roles: Iterable[UserRole]) -> bool:
    return estado in EDITABLE_STATES and has_any_role(roles, EDITOR_ROLES)


def check_editable(estado: EstadoExpediente, roles: Iterable[UserRole]) -> None:
    # El rol se evalúa primero: un COORDINADOR recibe 403 en cualquier estado.
    if not has_any_role(roles, EDITOR_ROLES):
        raise EditForbiddenError()
    if estado not in EDITABLE_STATES:
        raise ExpedienteNotEditableError()


def can_create(roles: Iterable[UserRole]) -> bool:
    return has_any_role(roles, EDITOR_ROLES)


def allowed_transitions(
    estado: EstadoExpediente, roles: Iterable[UserRole]
) -> list[EstadoExpediente]:
    """Destinos alcanzables por el actor desde `estado` (orden estable)."""
    role_set = frozenset(roles)
    return [
        t.destino
        for t in TRANSITIONS.values()
        if t.origen == estado and has_any_role(role_set, t.roles)
    ]
