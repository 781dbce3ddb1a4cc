"""
===============================================================================
TARJETA CRC — sii_dicri/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (pool, repositorios, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends) y para scripts de consola.
  - Mantener singletons con caching (lru_cache) para recursos pesados.
  - Decidir in-memory vs PostgreSQL según Settings.app_env.

Colaboradores:
  - sii_dicri.crosscutting.config.get_settings
  - sii_dicri.domain.repositories.* (puertos)
  - sii_dicri.infrastructure.* (implementaciones)
  - sii_dicri.application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI.
  - El pool es un handle explícito: se crea acá (perezoso) y lo cierra el
    lifespan de la app.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import (
    ChangeEstadoUseCase,
    CreateExpedienteUseCase,
    CreateIndicioUseCase,
    CreateUserUseCase,
    DeleteExpedienteUseCase,
    DeleteIndicioUseCase,
    GetExpedienteUseCase,
    ListExpedientesUseCase,
    ListFiscaliasUseCase,
    ListRolesUseCase,
    ListTiposCasoUseCase,
    ListUsersUseCase,
    UpdateExpedienteUseCase,
    UpdateIndicioUseCase,
    UpdateUserUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    CatalogRepository,
    ExpedienteRepository,
    UserRepository,
)
from .identity.auth_users import hash_password
from .infrastructure.db import DatabasePool
from .infrastructure.repositories import (
    InMemoryCatalogRepository,
    InMemoryExpedienteRepository,
    InMemoryUserRepository,
    PostgresCatalogRepository,
    PostgresExpedienteRepository,
    PostgresUserRepository,
)

# =============================================================================
# Recursos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_db_pool() -> DatabasePool:
    """Pool PostgreSQL compartido por el proceso (abre en el primer uso)."""
    settings = get_settings()
    return DatabasePool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        statement_timeout_ms=settings.db_statement_timeout_ms,
        connect_timeout_seconds=settings.db_connect_timeout_seconds,
    )


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Usuarios y roles (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        return InMemoryUserRepository()
    return PostgresUserRepository(get_db_pool())


@lru_cache(maxsize=1)
def get_expediente_repository() -> ExpedienteRepository:
    """
    Expedientes e indicios.

    En test los roles del actor para el re-chequeo salen del repositorio
    in-memory de usuarios (misma fuente que el login).
    """
    if get_settings().is_test():
        users = get_user_repository()
        return InMemoryExpedienteRepository(roles_provider=users.active_roles)
    return PostgresExpedienteRepository(get_db_pool())


@lru_cache(maxsize=1)
def get_catalog_repository() -> CatalogRepository:
    if get_settings().is_test():
        return InMemoryCatalogRepository()
    return PostgresCatalogRepository(get_db_pool())


def reset_container() -> None:
    """Olvida los singletons cacheados (tests y scripts)."""
    for factory in (
        get_catalog_repository,
        get_expediente_repository,
        get_user_repository,
        get_db_pool,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso: expedientes
# =============================================================================


def get_list_expedientes_use_case() -> ListExpedientesUseCase:
    return ListExpedientesUseCase(expediente_repository=get_expediente_repository())


def get_get_expediente_use_case() -> GetExpedienteUseCase:
    return GetExpedienteUseCase(expediente_repository=get_expediente_repository())


def get_create_expediente_use_case() -> CreateExpedienteUseCase:
    return CreateExpedienteUseCase(
        expediente_repository=get_expediente_repository(),
        catalog_repository=get_catalog_repository(),
    )


def get_update_expediente_use_case() -> UpdateExpedienteUseCase:
    return UpdateExpedienteUseCase(
        expediente_repository=get_expediente_repository(),
        catalog_repository=get_catalog_repository(),
    )


def get_change_estado_use_case() -> ChangeEstadoUseCase:
    return ChangeEstadoUseCase(expediente_repository=get_expediente_repository())


def get_delete_expediente_use_case() -> DeleteExpedienteUseCase:
    return DeleteExpedienteUseCase(expediente_repository=get_expediente_repository())


# =============================================================================
# Casos de uso: indicios
# =============================================================================


def get_create_indicio_use_case() -> CreateIndicioUseCase:
    return CreateIndicioUseCase(expediente_repository=get_expediente_repository())


def get_update_indicio_use_case() -> UpdateIndicioUseCase:
    return UpdateIndicioUseCase(expediente_repository=get_expediente_repository())


def get_delete_indicio_use_case() -> DeleteIndicioUseCase:
    return DeleteIndicioUseCase(expediente_repository=get_expediente_repository())


# =============================================================================
# Casos de uso: catálogos
# =============================================================================


def get_list_fiscalias_use_case() -> ListFiscaliasUseCase:
    return ListFiscaliasUseCase(catalog_repository=get_catalog_repository())


def get_list_tipos_caso_use_case() -> ListTiposCasoUseCase:
    return ListTiposCasoUseCase(catalog_repository=get_catalog_repository())


# =============================================================================
# Casos de uso: usuarios (ADMIN)
# =============================================================================


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(user_repository=get_user_repository())


def get_list_roles_use_case() -> ListRolesUseCase:
    return ListRolesUseCase(user_repository=get_user_repository())


def get_create_user_use_case() -> CreateUserUseCase:
    """Caso de uso: alta de usuario + roles (transaccional)."""
    return CreateUserUseCase(
        user_repository=get_user_repository(),
        password_hasher=hash_password,
        password_min_length=get_settings().password_min_length,
    )


def get_update_user_use_case() -> UpdateUserUseCase:
    """Caso de uso: actualización de usuario + reemplazo de roles."""
    return UpdateUserUseCase(
        user_repository=get_user_repository(),
        password_hasher=hash_password,
        password_min_length=get_settings().password_min_length,
    )


# =============================================================================
# Ciclo de vida / salud
# =============================================================================


def database_status() -> str:
    """'connected' / 'disconnected' (o 'in-memory' en test)."""
    if get_settings().is_test():
        return "in-memory"
    return "connected" if get_db_pool().ping() else "disconnected"


def close_db_pool() -> None:
    """Cierra el pool si llegó a crearse y olvida el singleton."""
    if get_db_pool.cache_info().currsize:
        get_db_pool().close()
    get_db_pool.cache_clear()
