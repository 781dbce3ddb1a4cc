"""
USE CASE: List Catálogos.

Fiscalías y tipos de caso activos, ordenados por nombre. Sin reglas de rol:
cualquier sesión válida puede leerlos.
"""

from __future__ import annotations

from typing import List

from ....domain.entities import CatalogEntry
from ....domain.repositories import CatalogRepository


class ListFiscaliasUseCase:
    def __init__(self, catalog_repository: CatalogRepository) -> None:
        self._catalogs = catalog_repository

    def execute(self) -> List[CatalogEntry]:
        return self._catalogs.list_fiscalias()


class ListTiposCasoUseCase:
    def __init__(self, catalog_repository: CatalogRepository) -> None:
        self._catalogs = catalog_repository

    def execute(self) -> List[CatalogEntry]:
        return self._catalogs.list_tipos_caso()
