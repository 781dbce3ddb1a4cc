"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Identidad de sesión y normalización de roles

Responsabilidades:
    - Definir SessionIdentity: el valor explícito que viaja desde la
      dependencia de auth hasta los casos de uso (no se cuelga del request).
    - Normalizar nombres de rol (trim + upper) UNA vez, al emitir o verificar
      la sesión; después los chequeos son intersección de conjuntos.
    - Traducir nombres a UserRole (set cerrado), descartando desconocidos.

Colaboradores:
    - domain.entities.UserRole / Role
    - identity.auth_users (emite y reconstruye SessionIdentity)
    - interfaces.api.http.routers.* (reciben SessionIdentity por Depends)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..crosscutting.logger import logger
from ..domain.entities import Role, UserRole


def normalize_role_name(name: str) -> str:
    return (name or "").strip().upper()


def active_role_names(roles: Iterable[Role]) -> list[str]:
    """Nombres normalizados de los roles activos, sin duplicados y en orden."""
    names: list[str] = []
    for role in roles:
        if not role.activo:
            continue
        normalized = normalize_role_name(role.nombre)
        if normalized and normalized not in names:
            names.append(normalized)
    return names


def roles_from_names(names: Iterable[str]) -> frozenset[UserRole]:
    """
    Convierte nombres (ya normalizados o no) al set cerrado UserRole.

    Un rol del catálogo sin efecto en permisos se ignora con warning:
    no otorga nada, y un typo nunca habilita una operación.
    """
    roles: set[UserRole] = set()
    for name in names:
        normalized = normalize_role_name(name)
        try:
            roles.add(UserRole(normalized))
        except ValueError:
            logger.warning("Rol sin permisos asociados", extra={"rol": normalized})
    return frozenset(roles)


@dataclass(frozen=True, slots=True)
class SessionIdentity:
    """Identidad proyectada desde un token válido."""

    user_id: int
    usuario: str
    nombres: str
    role_names: tuple[str, ...] = ()
    roles: frozenset[UserRole] = field(default_factory=frozenset)

    @classmethod
    def from_names(
        cls, *, user_id: int, usuario: str, nombres: str, role_names: Iterable[str]
    ) -> "SessionIdentity":
        names = tuple(normalize_role_name(n) for n in role_names if normalize_role_name(n))
        return cls(
            user_id=user_id,
            usuario=usuario,
            nombres=nombres,
            role_names=names,
            roles=roles_from_names(names),
        )

    def has_any_role(self, allowed: Iterable[UserRole]) -> bool:
        return not self.roles.isdisjoint(allowed)

    def to_public_dict(self) -> dict[str, object]:
        """Forma que espera el frontend en `usuario`."""
        return {
            "sub": self.user_id,
            "usuario": self.usuario,
            "nombres": self.nombres,
            "roles": list(self.role_names),
        }
