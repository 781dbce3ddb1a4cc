"""Casos de uso de catálogos de referencia (solo lectura)."""

from __future__ import annotations

from .list_catalogos import ListFiscaliasUseCase, ListTiposCasoUseCase

__all__ = ["ListFiscaliasUseCase", "ListTiposCasoUseCase"]
