"""
===============================================================================
TARJETA CRC — sii_dicri/api/exception_handlers.py (Manejo Centralizado)
===============================================================================

Responsabilidades:
  - Traducir excepciones a respuestas {ok:false, mensaje, codigo, requestId}.
  - Centralizar logging de errores con request_id + error_id.
  - No filtrar detalles internos: infraestructura y configuración
    responden siempre "Error en el servidor.".

Mapeo:
  - AppHTTPException            -> su status/código
  - HTTPException (Starlette)   -> mismo status, sobre estándar
  - RequestValidationError      -> 400 VALIDATION_ERROR (+ errores[])
  - DomainRuleViolation         -> 400/403/404 según código (fallback si un
                                   caso de uso no la convirtió en resultado)
  - DatabaseError               -> 500 DATABASE_ERROR
  - DicriError / Exception      -> 500 INTERNAL_ERROR

Colaboradores:
  - crosscutting.error_responses
  - crosscutting.exceptions
  - domain.errors
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.error_responses import (
    GENERIC_SERVER_MESSAGE,
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    database_error,
    internal_error,
)
from ..crosscutting.exceptions import DatabaseError, DicriError
from ..crosscutting.logger import logger
from ..domain.errors import DomainRuleViolation, RuleErrorCode

MSG_INVALID_INPUT = "Datos de entrada inválidos."

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
}

_RULE_STATUS: dict[RuleErrorCode, tuple[int, ErrorCode]] = {
    RuleErrorCode.VALIDATION_ERROR: (400, ErrorCode.VALIDATION_ERROR),
    RuleErrorCode.CONFLICT: (400, ErrorCode.CONFLICT),
    RuleErrorCode.FORBIDDEN: (403, ErrorCode.FORBIDDEN),
    RuleErrorCode.NOT_FOUND: (404, ErrorCode.NOT_FOUND),
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """404 de ruta inexistente, 405, etc. con el mismo sobre."""
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    detail = exc.detail if isinstance(exc.detail, str) else GENERIC_SERVER_MESSAGE
    app_exc = AppHTTPException(status_code=exc.status_code, code=code, detail=detail)
    app_exc.headers = getattr(exc, "headers", None)
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "campo": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "mensaje": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info("Request inválido", extra={"errores": errors})
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail=MSG_INVALID_INPUT,
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def domain_rule_handler(
    request: Request, exc: DomainRuleViolation
) -> JSONResponse:
    status_code, code = _RULE_STATUS.get(exc.code, (400, ErrorCode.VALIDATION_ERROR))
    app_exc = AppHTTPException(status_code=status_code, code=code, detail=exc.message)
    return await app_exception_handler(request, app_exc)


async def _server_error(
    request: Request, *, exc: DicriError, app_exc: AppHTTPException
) -> JSONResponse:
    logger.error(
        "Error de servidor",
        extra={
            "code": app_exc.code.value,
            "error_type": type(exc).__name__,
            "error_id": exc.error_id,
            "detalle": exc.message,
            "original_error": repr(exc.original_error) if exc.original_error else None,
        },
    )
    app_exc.errors = [{"errorId": exc.error_id}]
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _server_error(request, exc=exc, app_exc=database_error())


async def dicri_error_handler(request: Request, exc: DicriError) -> JSONResponse:
    # Incluye SigningKeyMissingError: configuración rota, nunca 401.
    return await _server_error(request, exc=exc, app_exc=internal_error())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log completo (stacktrace) y respuesta genérica."""
    logger.error(
        "Excepción no controlada",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"error_type": type(exc).__name__},
    )
    return await app_exception_handler(request, internal_error())


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException antes que HTTPException genérica.
      - Exception se registra al final como fallback.
    """
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DomainRuleViolation, domain_rule_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(DicriError, dicri_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
