"""
===============================================================================
APPLICATION USE CASES (Public API / Exports)
===============================================================================
Re-exporta los casos de uso por subdominio para que la composición
(container) y los routers importen desde un único lugar.
===============================================================================
"""

from __future__ import annotations

from .catalogos import ListFiscaliasUseCase, ListTiposCasoUseCase
from .expedientes import (
    ChangeEstadoUseCase,
    CreateExpedienteUseCase,
    DeleteExpedienteUseCase,
    ExpedienteInput,
    GetExpedienteUseCase,
    ListExpedientesUseCase,
    UpdateExpedienteUseCase,
)
from .indicios import (
    CreateIndicioUseCase,
    DeleteIndicioUseCase,
    IndicioInput,
    UpdateIndicioUseCase,
)
from .users import (
    CreateUserInput,
    CreateUserUseCase,
    ListRolesUseCase,
    ListUsersUseCase,
    UpdateUserInput,
    UpdateUserUseCase,
)

__all__ = [
    # Catálogos
    "ListFiscaliasUseCase",
    "ListTiposCasoUseCase",
    # Expedientes
    "ChangeEstadoUseCase",
    "CreateExpedienteUseCase",
    "DeleteExpedienteUseCase",
    "ExpedienteInput",
    "GetExpedienteUseCase",
    "ListExpedientesUseCase",
    "UpdateExpedienteUseCase",
    # Indicios
    "CreateIndicioUseCase",
    "DeleteIndicioUseCase",
    "IndicioInput",
    "UpdateIndicioUseCase",
    # Usuarios
    "CreateUserInput",
    "CreateUserUseCase",
    "ListRolesUseCase",
    "ListUsersUseCase",
    "UpdateUserInput",
    "UpdateUserUseCase",
]
