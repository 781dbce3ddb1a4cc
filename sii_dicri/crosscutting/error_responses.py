"""
===============================================================================
MÓDULO: Respuestas de error estándar (sobre {ok, mensaje})
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP para que:
- El frontend siga leyendo `ok` y `mensaje` como siempre
- El cliente pueda ramificar por `codigo` estable
- El backend pueda correlacionar por requestId

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir el sobre de error (ErrorEnvelope)
  - Proveer factories de errores frecuentes
  - Proveer handlers (FastAPI) que devuelven JSON

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores internos)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

GENERIC_SERVER_MESSAGE = "Error en el servidor."


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorEnvelope(BaseModel):
    """
    Sobre de error compatible con el frontend.

    Campos extra:
    - codigo: error code estable para clientes
    - errores: lista opcional de detalles (ej: [{"campo":"x","mensaje":"..."}])
    """

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = False
    mensaje: str
    codigo: ErrorCode
    request_id: str | None = Field(default=None, alias="requestId")
    errores: list[dict[str, Any]] | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


_OPENAPI_ERROR_CONTENT = {
    "application/json": {"schema": {"$ref": "#/components/schemas/ErrorEnvelope"}}
}

OPENAPI_ERROR_RESPONSES = {
    status: {
        "description": description,
        "model": ErrorEnvelope,
        "content": _OPENAPI_ERROR_CONTENT,
    }
    for status, description in (
        ("400", "Bad Request"),
        ("401", "Unauthorized"),
        ("403", "Forbidden"),
        ("404", "Not Found"),
        ("413", "Payload Too Large"),
        ("500", "Internal Server Error"),
    )
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Transportar errores de validación (errores[])

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    # El frontend histórico espera 400 para conflictos de negocio.
    return AppHTTPException(400, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Sesión no válida. Inicie sesión nuevamente.") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str = "No autorizado") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def payload_too_large(max_bytes: int) -> AppHTTPException:
    return AppHTTPException(
        413,
        ErrorCode.PAYLOAD_TOO_LARGE,
        f"El cuerpo de la solicitud excede el máximo permitido ({max_bytes} bytes).",
    )


def internal_error(detail: str = GENERIC_SERVER_MESSAGE) -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def database_error(detail: str = GENERIC_SERVER_MESSAGE) -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.DATABASE_ERROR, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler para AppHTTPException (propaga headers opcionales)."""
    envelope = ErrorEnvelope(
        mensaje=str(exc.detail),
        codigo=exc.code,
        request_id=request_id_from(request),
        errores=exc.errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.to_content(),
        headers=getattr(exc, "headers", None),
    )
