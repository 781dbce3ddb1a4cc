"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/catalog.py
============================================================
Class: PostgresCatalogRepository

Responsibilities:
- Leer catálogos de referencia (fiscalías, tipos de caso).
- Lookup por id (incluye inactivos: quien llama decide qué aceptar).

Collaborators:
- Tablas: fiscalias, tipos_caso
============================================================
"""

from __future__ import annotations

from typing import Optional

from ....domain.entities import CatalogEntry
from .base import PostgresRepository


def _row_to_entry(row: tuple) -> CatalogEntry:
    return CatalogEntry(id=row[0], nombre=row[1], activo=bool(row[2]))


class PostgresCatalogRepository(PostgresRepository):
    _SQL_LIST_FISCALIAS = """
        SELECT id_fiscalia, nombre, activo FROM fiscalias
        WHERE activo ORDER BY nombre ASC
    """
    _SQL_GET_FISCALIA = (
        "SELECT id_fiscalia, nombre, activo FROM fiscalias WHERE id_fiscalia = %s"
    )
    _SQL_LIST_TIPOS = """
        SELECT id_tipo_caso, nombre, activo FROM tipos_caso
        WHERE activo ORDER BY nombre ASC
    """
    _SQL_GET_TIPO = (
        "SELECT id_tipo_caso, nombre, activo FROM tipos_caso WHERE id_tipo_caso = %s"
    )

    def list_fiscalias(self) -> list[CatalogEntry]:
        rows = self._fetchall(
            query=self._SQL_LIST_FISCALIAS,
            params=(),
            context_msg="PostgresCatalogRepository: list_fiscalias failed",
            extra={},
        )
        return [_row_to_entry(r) for r in rows]

    def list_tipos_caso(self) -> list[CatalogEntry]:
        rows = self._fetchall(
            query=self._SQL_LIST_TIPOS,
            params=(),
            context_msg="PostgresCatalogRepository: list_tipos_caso failed",
            extra={},
        )
        return [_row_to_entry(r) for r in rows]

    def get_fiscalia(self, fiscalia_id: int) -> Optional[CatalogEntry]:
        row = self._fetchone(
            query=self._SQL_GET_FISCALIA,
            params=(fiscalia_id,),
            context_msg="PostgresCatalogRepository: get_fiscalia failed",
            extra={"fiscalia_id": fiscalia_id},
        )
        return _row_to_entry(row) if row else None

    def get_tipo_caso(self, tipo_caso_id: int) -> Optional[CatalogEntry]:
        row = self._fetchone(
            query=self._SQL_GET_TIPO,
            params=(tipo_caso_id,),
            context_msg="PostgresCatalogRepository: get_tipo_caso failed",
            extra={"tipo_caso_id": tipo_caso_id},
        )
        return _row_to_entry(row) if row else None
