"""
In-memory catálogo de fiscalías y tipos de caso (tests / desarrollo local).

Los datos por defecto replican la semilla de la migración inicial.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ....domain.entities import CatalogEntry

DEFAULT_FISCALIAS = (
    CatalogEntry(id=1, nombre="Fiscalía de Distrito Metropolitana"),
    CatalogEntry(id=2, nombre="Fiscalía de Delitos contra la Vida"),
    CatalogEntry(id=3, nombre="Fiscalía contra el Crimen Organizado"),
)

DEFAULT_TIPOS_CASO = (
    CatalogEntry(id=1, nombre="Homicidio"),
    CatalogEntry(id=2, nombre="Robo"),
    CatalogEntry(id=3, nombre="Lesiones"),
)


class InMemoryCatalogRepository:
    def __init__(
        self,
        fiscalias: Sequence[CatalogEntry] = DEFAULT_FISCALIAS,
        tipos_caso: Sequence[CatalogEntry] = DEFAULT_TIPOS_CASO,
    ) -> None:
        self._fiscalias: Dict[int, CatalogEntry] = {f.id: f for f in fiscalias}
        self._tipos: Dict[int, CatalogEntry] = {t.id: t for t in tipos_caso}

    @staticmethod
    def _active_sorted(entries: Dict[int, CatalogEntry]) -> List[CatalogEntry]:
        return sorted((e for e in entries.values() if e.activo), key=lambda e: e.nombre)

    def list_fiscalias(self) -> List[CatalogEntry]:
        return self._active_sorted(self._fiscalias)

    def list_tipos_caso(self) -> List[CatalogEntry]:
        return self._active_sorted(self._tipos)

    def get_fiscalia(self, fiscalia_id: int) -> Optional[CatalogEntry]:
        return self._fiscalias.get(fiscalia_id)

    def get_tipo_caso(self, tipo_caso_id: int) -> Optional[CatalogEntry]:
        return self._tipos.get(tipo_caso_id)
