"""
Base de todos los DTOs HTTP.

- Alias camelCase en JSON (lo que consume el frontend histórico).
- populate_by_name: los routers construyen respuestas con nombres Python.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OkRes(CamelModel):
    """Respuesta de comandos sin payload: {ok, mensaje}."""

    ok: bool = True
    mensaje: str | None = None
