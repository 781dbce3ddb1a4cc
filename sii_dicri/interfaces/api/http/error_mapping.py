"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP {ok:false, mensaje})
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a AppHTTPException.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - VALIDATION_ERROR -> 400, CONFLICT -> 400 (el frontend espera 400 para
    reglas de negocio), FORBIDDEN -> 403, NOT_FOUND -> 404.
  - El mensaje del caso de uso viaja tal cual al cliente.

Colaboradores:
  - application.usecases.* (ExpedienteError, UserError)
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn, Protocol

from sii_dicri.crosscutting.error_responses import (
    conflict,
    forbidden,
    not_found,
    validation_error,
)
from sii_dicri.domain.errors import RuleErrorCode


class _UseCaseError(Protocol):
    code: RuleErrorCode
    message: str


def raise_use_case_error(error: _UseCaseError) -> NoReturn:
    """Traduce ExpedienteError / UserError -> HTTP."""
    if error.code == RuleErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == RuleErrorCode.NOT_FOUND:
        raise not_found(error.message)
    if error.code == RuleErrorCode.CONFLICT:
        raise conflict(error.message)
    # VALIDATION_ERROR y cualquier código nuevo: 400
    raise validation_error(error.message)
