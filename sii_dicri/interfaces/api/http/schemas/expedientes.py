"""
===============================================================================
TARJETA CRC — schemas/expedientes.py
===============================================================================

Módulo:
    Schemas HTTP para Expedientes e Indicios (lectura)

Responsabilidades:
    - Definir DTOs de request/response de /expedientes.
    - Exponer nombres JSON compatibles con el frontend (idExpediente,
      numeroExpediente, fechaHecho, accionesPermitidas, ...).

Notas:
    - Los campos de request son opcionales: la validación de obligatorios la
      hace el caso de uso para responder con el mensaje de negocio.
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from .common import CamelModel

# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class ExpedienteReq(CamelModel):
    """Alta y modificación de campos núcleo (reemplazo completo)."""

    descripcion: str | None = Field(default=None, max_length=200)
    id_fiscalia: int | None = None
    id_tipo_caso: int | None = None
    fecha_hecho: date | None = None


class CambioEstadoReq(CamelModel):
    nuevo_estado: str | None = None
    justificacion: str | None = Field(default=None, max_length=500)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class IndicioRes(CamelModel):
    id_indicio: int
    id_expediente: int
    nombre: str
    descripcion: str | None = None
    color: str | None = None
    tamano: str | None = None
    peso: float | None = None
    ubicacion: str | None = None
    id_usuario_registro: int | None = None
    fecha_registro: datetime | None = None


class ExpedienteRes(CamelModel):
    id_expediente: int
    numero_expediente: str
    descripcion: str
    id_fiscalia: int
    fiscalia: str
    id_tipo_caso: int
    tipo_caso: str
    fecha_hecho: date
    estado: str
    justificacion_rechazo: str | None = None
    id_usuario_registro: int | None = None
    usuario_registro: str | None = None
    fecha_registro: datetime | None = None
    fecha_modificacion: datetime | None = None


class ExpedientesListRes(CamelModel):
    ok: bool = True
    expedientes: list[ExpedienteRes]


class ExpedienteDetailRes(CamelModel):
    ok: bool = True
    expediente: ExpedienteRes
    indicios: list[IndicioRes]
    acciones_permitidas: list[str]
    editable: bool


class ExpedienteCreatedRes(CamelModel):
    ok: bool = True
    mensaje: str
    id_expediente: int
    numero_expediente: str
