"""
===============================================================================
USE CASE: List Expedientes
===============================================================================

Business Goal:
    Listar expedientes activos con filtros opcionales por estado y por rango
    de fecha del hecho.

Reglas:
    - `estado`, si viene, debe ser uno de los cuatro estados del workflow.
    - `fecha_inicio` no puede ser posterior a `fecha_fin`.
    - Cualquier usuario autenticado puede listar.
===============================================================================
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from ....domain.entities import EstadoExpediente, ExpedienteFilters
from ....domain.repositories import ExpedienteRepository
from .expediente_results import ExpedienteListResult, validation_error


def parse_estado(raw: Optional[str]) -> Optional[EstadoExpediente]:
    """Normaliza el texto recibido; ValueError si no es un estado conocido."""
    value = (raw or "").strip().upper()
    if not value:
        return None
    return EstadoExpediente(value)


class ListExpedientesUseCase:
    def __init__(self, expediente_repository: ExpedienteRepository) -> None:
        self._expedientes = expediente_repository

    def execute(
        self,
        *,
        estado: Optional[str] = None,
        fecha_inicio: Optional[date] = None,
        fecha_fin: Optional[date] = None,
    ) -> ExpedienteListResult:
        try:
            estado_filter = parse_estado(estado)
        except ValueError:
            return ExpedienteListResult(
                error=validation_error(f"Estado inválido: {estado}.")
            )

        if fecha_inicio and fecha_fin and fecha_inicio > fecha_fin:
            return ExpedienteListResult(
                error=validation_error(
                    "La fecha de inicio no puede ser posterior a la fecha fin."
                )
            )

        filters = ExpedienteFilters(
            estado=estado_filter, fecha_inicio=fecha_inicio, fecha_fin=fecha_fin
        )
        return ExpedienteListResult(
            expedientes=self._expedientes.list_expedientes(filters)
        )
