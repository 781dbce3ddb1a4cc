"""
===============================================================================
EXPEDIENTE USE CASES PACKAGE (Public API / Exports)
===============================================================================
Punto único de importación para los casos de uso de expedientes, sus DTOs
de entrada y los modelos de resultado.
===============================================================================
"""

from __future__ import annotations

from .change_estado import ChangeEstadoUseCase
from .create_expediente import (
    CreateExpedienteUseCase,
    ExpedienteInput,
    resolve_expediente_data,
)
from .delete_expediente import DeleteExpedienteUseCase
from .expediente_results import (
    CommandResult,
    CreateExpedienteResult,
    CreateIndicioResult,
    ExpedienteDetailResult,
    ExpedienteError,
    ExpedienteErrorCode,
    ExpedienteListResult,
)
from .get_expediente import GetExpedienteUseCase
from .list_expedientes import ListExpedientesUseCase, parse_estado
from .update_expediente import UpdateExpedienteUseCase

__all__ = [
    # Use cases
    "ChangeEstadoUseCase",
    "CreateExpedienteUseCase",
    "DeleteExpedienteUseCase",
    "GetExpedienteUseCase",
    "ListExpedientesUseCase",
    "UpdateExpedienteUseCase",
    # Inputs / helpers
    "ExpedienteInput",
    "parse_estado",
    "resolve_expediente_data",
    # Results
    "CommandResult",
    "CreateExpedienteResult",
    "CreateIndicioResult",
    "ExpedienteDetailResult",
    "ExpedienteError",
    "ExpedienteErrorCode",
    "ExpedienteListResult",
]
