"""Schemas HTTP de catálogos."""

from __future__ import annotations

from .common import CamelModel


class FiscaliaRes(CamelModel):
    id_fiscalia: int
    nombre: str


class TipoCasoRes(CamelModel):
    id_tipo_caso: int
    nombre: str


class FiscaliasListRes(CamelModel):
    ok: bool = True
    fiscalias: list[FiscaliaRes]


class TiposCasoListRes(CamelModel):
    ok: bool = True
    tipos_caso: list[TipoCasoRes]
