"""Casos de uso de indicios (alta, modificación y baja lógica)."""

from __future__ import annotations

from .create_indicio import CreateIndicioUseCase
from .delete_indicio import DeleteIndicioUseCase
from .indicio_input import MSG_INVALID_PESO, IndicioInput, parse_peso
from .update_indicio import UpdateIndicioUseCase

__all__ = [
    "CreateIndicioUseCase",
    "DeleteIndicioUseCase",
    "IndicioInput",
    "MSG_INVALID_PESO",
    "UpdateIndicioUseCase",
    "parse_peso",
]
