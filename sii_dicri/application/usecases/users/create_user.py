"""
===============================================================================
USE CASE: Create User (usuario + roles, todo o nada)
===============================================================================

Name:
    Create User Use Case

Business Goal:
    Dar de alta un usuario con su credencial hasheada y asignarle uno o más
    roles en una única transacción: nunca queda observable un usuario sin
    roles.

Why (Context / Intención):
    - Las validaciones (obligatorios, complejidad de contraseña, al menos un
      rol) ocurren antes de abrir la transacción: sin efectos parciales.
    - La unicidad de `usuario` entre activos la garantiza la base; el
      repositorio la traduce a DuplicateUsernameError y la transacción hace
      rollback completo.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Normalizar y validar campos de entrada.
    - Hashear la contraseña (hasher inyectado).
    - Ejecutar insert_user + insert_roles (batch) dentro de transaction().

Collaborators:
    - UserRepository.transaction -> UserWriteSession
    - application.password_policy.password_policy_error
    - password_hasher: Callable[[str], str]
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ....crosscutting.logger import logger
from ....domain.entities import NewUser
from ....domain.errors import DomainRuleViolation
from ....domain.repositories import UserRepository
from ...password_policy import DEFAULT_MIN_LENGTH, password_policy_error
from .user_results import CreateUserResult, UserError

MSG_REQUIRED = (
    "Usuario, primer nombre, primer apellido, correo y contraseña son obligatorios"
)
MSG_ROLES_REQUIRED = "Debe asignar al menos un rol"

PasswordHasher = Callable[[str], str]


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def normalize_role_ids(role_ids: Optional[Sequence[int]]) -> List[int]:
    """Deduplica preservando orden; lista vacía si no vino nada."""
    seen: List[int] = []
    for raw in role_ids or ():
        role_id = int(raw)
        if role_id not in seen:
            seen.append(role_id)
    return seen


@dataclass(frozen=True)
class CreateUserInput:
    usuario: Optional[str]
    primer_nombre: Optional[str]
    primer_apellido: Optional[str]
    email: Optional[str]
    contrasena: Optional[str]
    roles: Sequence[int] = field(default_factory=tuple)
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None


class CreateUserUseCase:
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
        self, data: CreateUserInput, *, acting_user_id: Optional[int]
    ) -> CreateUserResult:
        usuario = _clean(data.usuario)
        primer_nombre = _clean(data.primer_nombre)
        primer_apellido = _clean(data.primer_apellido)
        email = _clean(data.email)

        if not (usuario and primer_nombre and primer_apellido and email and data.contrasena):
            return CreateUserResult(error=UserError.validation(MSG_REQUIRED))

        policy_error = password_policy_error(
            data.contrasena, min_length=self._min_length
        )
        if policy_error:
            return CreateUserResult(error=UserError.validation(policy_error))

        role_ids = normalize_role_ids(data.roles)
        if not role_ids:
            return CreateUserResult(error=UserError.validation(MSG_ROLES_REQUIRED))

        new_user = NewUser(
            usuario=usuario,
            password_hash=self._hash(data.contrasena),
            primer_nombre=primer_nombre,
            primer_apellido=primer_apellido,
            email=email,
            segundo_nombre=_clean(data.segundo_nombre) or None,
            segundo_apellido=_clean(data.segundo_apellido) or None,
        )

        try:
            with self._users.transaction() as tx:
                user_id = tx.insert_user(new_user, acting_user_id)
                tx.insert_roles(user_id, role_ids, acting_user_id)
        except DomainRuleViolation as exc:
            logger.info(
                "Alta de usuario rechazada",
                extra={"usuario": usuario, "motivo": exc.code.value},
            )
            return CreateUserResult(error=UserError.from_violation(exc))

        logger.info(
            "Usuario creado",
            extra={"user_id": user_id, "roles_asignados": role_ids},
        )
        return CreateUserResult(user_id=user_id)
