"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and unit testing with stub repositories.

Collaborators
- domain.entities: User, Role, Expediente, Indicio, CatalogEntry
- infrastructure.repositories: postgres.*, in_memory.* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Mutating expediente/indicio operations take the acting user id and MUST
  re-evaluate workflow rules under a row lock with roles loaded from storage.
- Business-rule failures are raised as domain.errors.DomainRuleViolation;
  infrastructure failures as crosscutting.exceptions.DatabaseError.
"""

from __future__ import annotations

from typing import ContextManager, List, Optional, Protocol, Sequence

from .entities import (
    CatalogEntry,
    EstadoChange,
    EstadoExpediente,
    Expediente,
    ExpedienteData,
    ExpedienteFilters,
    Indicio,
    IndicioData,
    NewUser,
    Role,
    User,
    UserChanges,
    UserSummary,
)


class UserWriteSession(Protocol):
    """
    R: Statements available inside one user/role transaction.

    Everything executed through a session commits together or not at all.
    """

    def insert_user(self, data: NewUser, acting_user_id: Optional[int]) -> int:
        """R: Insert user row, return new id. Raises DuplicateUsernameError."""
        ...

    def update_user(
        self,
        user_id: int,
        changes: UserChanges,
        password_hash: Optional[str],
        acting_user_id: Optional[int],
    ) -> bool:
        """R: Update user row (and credential when given). False if absent."""
        ...

    def delete_roles(self, user_id: int) -> None:
        """R: Remove ALL role assignments of the user."""
        ...

    def insert_roles(
        self, user_id: int, role_ids: Sequence[int], acting_user_id: Optional[int]
    ) -> None:
        """R: Batch insert of assignments. Raises UnknownRoleError."""
        ...


class UserRepository(Protocol):
    """
    R: Interface for users and role assignments.

    Implementations must provide:
      - Lookups for authentication (by username / by id)
      - Admin listing with role names
      - A scoped transaction for multi-statement writes
    """

    def get_user_by_username(self, usuario: str) -> Optional[User]:
        """R: Active or inactive user with that username (active preferred)."""
        ...

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        ...

    def list_roles_for_user(self, user_id: int) -> List[Role]:
        """R: Assigned roles, including inactive catalogue rows."""
        ...

    def list_users(
        self, *, search: Optional[str] = None, activo: Optional[bool] = True
    ) -> List[UserSummary]:
        ...

    def list_roles(self) -> List[Role]:
        ...

    def transaction(self) -> ContextManager[UserWriteSession]:
        """R: Commit on normal exit, roll back on any exception."""
        ...


class ExpedienteRepository(Protocol):
    """
    R: Interface for expedientes and their indicios.

    Implementations must provide:
      - Listing / detail reads (soft-deleted rows excluded)
      - Creation with an atomically generated `numero`
      - Guarded writes that lock the expediente row and re-check rules
    """

    def list_expedientes(self, filters: ExpedienteFilters) -> List[Expediente]:
        ...

    def get_expediente(self, expediente_id: int) -> Optional[Expediente]:
        ...

    def list_indicios(self, expediente_id: int) -> List[Indicio]:
        ...

    def get_indicio(self, indicio_id: int) -> Optional[Indicio]:
        ...

    def create_expediente(self, data: ExpedienteData, actor_id: int) -> Expediente:
        """R: Insert in BORRADOR. Raises EditForbiddenError for non-editor roles."""
        ...

    def update_expediente(
        self, expediente_id: int, data: ExpedienteData, actor_id: int
    ) -> None:
        ...

    def change_estado(
        self,
        expediente_id: int,
        destino: EstadoExpediente,
        justificacion: Optional[str],
        actor_id: int,
    ) -> EstadoChange:
        ...

    def delete_expediente(self, expediente_id: int, actor_id: int) -> int:
        """R: Soft delete + cascade to indicios. Returns cascaded indicio count."""
        ...

    def create_indicio(
        self, expediente_id: int, data: IndicioData, actor_id: int
    ) -> int:
        ...

    def update_indicio(self, indicio_id: int, data: IndicioData, actor_id: int) -> None:
        ...

    def delete_indicio(self, indicio_id: int, actor_id: int) -> None:
        ...


class CatalogRepository(Protocol):
    """R: Read-only reference data (fiscalías, tipos de caso)."""

    def list_fiscalias(self) -> List[CatalogEntry]:
        ...

    def list_tipos_caso(self) -> List[CatalogEntry]:
        ...

    def get_fiscalia(self, fiscalia_id: int) -> Optional[CatalogEntry]:
        ...

    def get_tipo_caso(self, tipo_caso_id: int) -> Optional[CatalogEntry]:
        ...
