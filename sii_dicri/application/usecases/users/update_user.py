"""
===============================================================================
USE CASE: Update User (datos + reemplazo completo de roles)
===============================================================================

Business Goal:
    Actualizar datos personales, estado y (opcionalmente) la contraseña de un
    usuario, y REEMPLAZAR su conjunto de roles por el recibido.

Why (Context / Intención):
    - El reemplazo es total (delete all + batch insert), no un diff: el
      resultado es exactamente el conjunto pedido o, ante cualquier falla, el
      conjunto previo intacto (rollback de la transacción).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateUserUseCase

Responsibilities:
    - Validar obligatorios, roles y contraseña (solo si vino).
    - Ejecutar update_user -> delete_roles -> insert_roles en una transacción.

Collaborators:
    - UserRepository.transaction -> UserWriteSession
    - application.password_policy
    - password_hasher: Callable[[str], str]
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ....crosscutting.logger import logger
from ....domain.entities import UserChanges
from ....domain.errors import DomainRuleViolation, UserNotFoundError
from ....domain.repositories import UserRepository
from ...password_policy import DEFAULT_MIN_LENGTH, password_policy_error
from .create_user import MSG_ROLES_REQUIRED, PasswordHasher, normalize_role_ids
from .user_results import UpdateUserResult, UserError

MSG_REQUIRED = "Primer nombre, primer apellido y correo son obligatorios"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


@dataclass(frozen=True)
class UpdateUserInput:
    primer_nombre: Optional[str]
    primer_apellido: Optional[str]
    email: Optional[str]
    activo: bool = True
    roles: Sequence[int] = field(default_factory=tuple)
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None
    contrasena: Optional[str] = None


class UpdateUserUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        *,
        password_min_length: int = DEFAULT_MIN_LENGTH,
    ) -> None:
        self._users = user_repository
        self._hash = password_hasher
        self._min_length = password_min_length

    def execute(
        self,
        user_id: int,
        data: UpdateUserInput,
        *,
        acting_user_id: Optional[int],
    ) -> UpdateUserResult:
        changes = UserChanges(
            primer_nombre=_clean(data.primer_nombre),
            primer_apellido=_clean(data.primer_apellido),
            email=_clean(data.email),
            activo=bool(data.activo),
            segundo_nombre=_clean(data.segundo_nombre) or None,
            segundo_apellido=_clean(data.segundo_apellido) or None,
        )
        if not (changes.primer_nombre and changes.primer_apellido and changes.email):
            return UpdateUserResult(error=UserError.validation(MSG_REQUIRED))

        role_ids = normalize_role_ids(data.roles)
        if not role_ids:
            return UpdateUserResult(error=UserError.validation(MSG_ROLES_REQUIRED))

        password_hash = None
        if data.contrasena:
            policy_error = password_policy_error(
                data.contrasena, min_length=self._min_length
            )
            if policy_error:
                return UpdateUserResult(error=UserError.validation(policy_error))
            password_hash = self._hash(data.contrasena)

        try:
            with self._users.transaction() as tx:
                if not tx.update_user(user_id, changes, password_hash, acting_user_id):
                    raise UserNotFoundError()
                tx.delete_roles(user_id)
                tx.insert_roles(user_id, role_ids, acting_user_id)
        except DomainRuleViolation as exc:
            logger.info(
                "Actualización de usuario rechazada",
                extra={"user_id": user_id, "motivo": exc.code.value},
            )
            return UpdateUserResult(error=UserError.from_violation(exc))

        logger.info(
            "Usuario actualizado",
            extra={
                "user_id": user_id,
                "roles_asignados": role_ids,
                "cambio_contrasena": password_hash is not None,
            },
        )
        return UpdateUserResult(updated=True)
