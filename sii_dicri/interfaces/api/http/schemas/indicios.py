"""Schemas HTTP de /indicios (escritura)."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from .common import CamelModel


class IndicioReq(CamelModel):
    """
    Alta / modificación de indicio.

    `peso` acepta número o texto con coma decimal ("2,75"); la conversión
    y sus errores los resuelve el caso de uso.
    """

    id_expediente: int | None = None
    nombre: str | None = Field(default=None, max_length=150)
    descripcion: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, max_length=50)
    tamano: str | None = Field(default=None, max_length=50)
    peso: int | Decimal | str | None = None
    ubicacion: str | None = Field(default=None, max_length=200)


class IndicioCreatedRes(CamelModel):
    ok: bool = True
    mensaje: str
    id_indicio: int
