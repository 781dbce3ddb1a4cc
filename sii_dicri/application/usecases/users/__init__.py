"""Casos de uso de administración de usuarios y roles (solo ADMIN)."""

from __future__ import annotations

from .create_user import CreateUserInput, CreateUserUseCase, normalize_role_ids
from .list_users import ListRolesUseCase, ListUsersUseCase
from .update_user import UpdateUserInput, UpdateUserUseCase
from .user_results import (
    CreateUserResult,
    RoleListResult,
    UpdateUserResult,
    UserError,
    UserErrorCode,
    UserListResult,
)

__all__ = [
    "CreateUserInput",
    "CreateUserResult",
    "CreateUserUseCase",
    "ListRolesUseCase",
    "ListUsersUseCase",
    "RoleListResult",
    "UpdateUserInput",
    "UpdateUserResult",
    "UpdateUserUseCase",
    "UserError",
    "UserErrorCode",
    "UserListResult",
    "normalize_role_ids",
]
