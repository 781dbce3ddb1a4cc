"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios, catálogo de roles y asignaciones en memoria
    (tests / desarrollo local sin base).
  - Replicar la semántica de la base:
      - unicidad de `usuario` entre usuarios activos (case-insensitive)
      - asignaciones solo a roles existentes y activos
      - transacción todo-o-nada: snapshot al entrar, restauración ante
        cualquier excepción
  - Exponer los roles activos de un usuario para el re-chequeo del
    repositorio de expedientes.

Collaborators:
  - domain.entities (User, Role, UserSummary, NewUser, UserChanges)
  - domain.errors (DuplicateUsernameError, UnknownRoleError)

Constraints / Notes:
  - Thread-safe: RLock tomado durante toda la transacción.
  - Copias defensivas al devolver entidades.
============================================================
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, Iterator, List, Optional, Sequence

from ....domain.entities import (
    NewUser,
    Role,
    User,
    UserChanges,
    UserRole,
    UserSummary,
)
from ....domain.errors import DuplicateUsernameError, UnknownRoleError
from ....identity.users import roles_from_names

DEFAULT_ROLES = (
    Role(id=1, nombre=UserRole.TECNICO.value),
    Role(id=2, nombre=UserRole.COORDINADOR.value),
    Role(id=3, nombre=UserRole.ADMIN.value),
)


class _InMemoryUserWriteSession:
    """Escribe directo sobre el estado; el rollback lo hace el repositorio."""

    def __init__(self, repo: "InMemoryUserRepository"):
        self._repo = repo

    def insert_user(self, data: NewUser, acting_user_id: Optional[int]) -> int:
        repo = self._repo
        repo._ensure_username_free(data.usuario, exclude_id=None)
        user_id = repo._next_user_id
        repo._next_user_id += 1
        repo._users[user_id] = User(
            id=user_id,
            usuario=data.usuario,
            password_hash=data.password_hash,
            primer_nombre=data.primer_nombre,
            segundo_nombre=data.segundo_nombre,
            primer_apellido=data.primer_apellido,
            segundo_apellido=data.segundo_apellido,
            email=data.email,
            activo=True,
            fecha_registro=datetime.now(timezone.utc),
        )
        repo._assignments[user_id] = []
        return user_id

    def update_user(
        self,
        user_id: int,
        changes: UserChanges,
        password_hash: Optional[str],
        acting_user_id: Optional[int],
    ) -> bool:
        repo = self._repo
        current = repo._users.get(user_id)
        if current is None:
            return False
        if changes.activo and not current.activo:
            repo._ensure_username_free(current.usuario, exclude_id=user_id)
        repo._users[user_id] = replace(
            current,
            primer_nombre=changes.primer_nombre,
            segundo_nombre=changes.segundo_nombre,
            primer_apellido=changes.primer_apellido,
            segundo_apellido=changes.segundo_apellido,
            email=changes.email,
            activo=changes.activo,
            password_hash=password_hash or current.password_hash,
        )
        return True

    def delete_roles(self, user_id: int) -> None:
        self._repo._assignments[user_id] = []

    def insert_roles(
        self, user_id: int, role_ids: Sequence[int], acting_user_id: Optional[int]
    ) -> None:
        repo = self._repo
        assigned = repo._assignments.setdefault(user_id, [])
        for role_id in sorted(set(int(r) for r in role_ids)):
            role = repo._roles.get(role_id)
            if role is None or not role.activo:
                raise UnknownRoleError()
            if role_id not in assigned:
                assigned.append(role_id)


class InMemoryUserRepository:
    """Repositorio in-memory, thread-safe, de usuarios y roles."""

    def __init__(self, roles: Sequence[Role] = DEFAULT_ROLES) -> None:
        self._lock = RLock()
        self._roles: Dict[int, Role] = {r.id: r for r in roles}
        self._users: Dict[int, User] = {}
        self._assignments: Dict[int, List[int]] = {}
        self._next_user_id = 1

    # =========================================================
    # Helpers internos
    # =========================================================
    def _ensure_username_free(self, usuario: str, *, exclude_id: Optional[int]) -> None:
        key = usuario.strip().lower()
        for user in self._users.values():
            if user.id == exclude_id or not user.activo:
                continue
            if user.usuario.strip().lower() == key:
                raise DuplicateUsernameError()

    def _role_rows(self, user_id: int) -> List[Role]:
        return [
            self._roles[rid]
            for rid in sorted(self._assignments.get(user_id, []))
            if rid in self._roles
        ]

    # =========================================================
    # Lecturas
    # =========================================================
    def get_user_by_username(self, usuario: str) -> Optional[User]:
        key = (usuario or "").strip().lower()
        with self._lock:
            matches = [u for u in self._users.values() if u.usuario.lower() == key]
            if not matches:
                return None
            matches.sort(key=lambda u: (u.activo, u.id), reverse=True)
            return copy.copy(matches[0])

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.copy(user) if user else None

    def list_roles_for_user(self, user_id: int) -> List[Role]:
        with self._lock:
            return self._role_rows(user_id)

    def active_roles(self, user_id: int) -> frozenset[UserRole]:
        """Roles con efecto de permisos, solo si el usuario está activo."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None or not user.activo:
                return frozenset()
            return roles_from_names(r.nombre for r in self._role_rows(user_id) if r.activo)

    def list_users(
        self, *, search: Optional[str] = None, activo: Optional[bool] = True
    ) -> List[UserSummary]:
        needle = (search or "").strip().lower()
        with self._lock:
            out: List[UserSummary] = []
            for user in sorted(self._users.values(), key=lambda u: (u.usuario, u.id)):
                if activo is not None and user.activo != activo:
                    continue
                if needle:
                    haystack = " ".join(
                        filter(
                            None,
                            (
                                user.usuario,
                                user.email,
                                user.primer_nombre,
                                user.segundo_nombre,
                                user.primer_apellido,
                                user.segundo_apellido,
                            ),
                        )
                    ).lower()
                    if needle not in haystack:
                        continue
                roles = [r for r in self._role_rows(user.id) if r.activo]
                out.append(
                    UserSummary(
                        id=user.id,
                        usuario=user.usuario,
                        primer_nombre=user.primer_nombre,
                        segundo_nombre=user.segundo_nombre,
                        primer_apellido=user.primer_apellido,
                        segundo_apellido=user.segundo_apellido,
                        email=user.email,
                        activo=user.activo,
                        roles=[r.nombre for r in roles],
                        role_ids=[r.id for r in roles],
                    )
                )
            return out

    def list_roles(self) -> List[Role]:
        with self._lock:
            return [self._roles[k] for k in sorted(self._roles)]

    # =========================================================
    # Escritura transaccional
    # =========================================================
    @contextmanager
    def transaction(self) -> Iterator[_InMemoryUserWriteSession]:
        with self._lock:
            snapshot = (
                copy.deepcopy(self._users),
                copy.deepcopy(self._assignments),
                self._next_user_id,
            )
            try:
                yield _InMemoryUserWriteSession(self)
            except BaseException:
                self._users, self._assignments, self._next_user_id = snapshot
                raise
