"""
USE CASE: List Users / List Roles (administración).

`estado` admite "Activos" (default), "Inactivos" o "Todos"; `search` busca
por usuario, nombres, apellidos o correo (case-insensitive).
"""

from __future__ import annotations

from typing import Optional

from ....domain.repositories import UserRepository
from .user_results import RoleListResult, UserError, UserListResult

ESTADO_FILTERS: dict[str, Optional[bool]] = {
    "activos": True,
    "inactivos": False,
    "todos": None,
}


class ListUsersUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(
        self, *, search: Optional[str] = None, estado: Optional[str] = None
    ) -> UserListResult:
        key = (estado or "Activos").strip().lower()
        if key not in ESTADO_FILTERS:
            return UserListResult(
                error=UserError.validation(
                    "Estado inválido. Use Activos, Inactivos o Todos."
                )
            )
        users = self._users.list_users(
            search=(search or "").strip() or None, activo=ESTADO_FILTERS[key]
        )
        return UserListResult(users=users)


class ListRolesUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self) -> RoleListResult:
        return RoleListResult(roles=self._users.list_roles())
