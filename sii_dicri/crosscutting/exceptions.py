"""
===============================================================================
MÓDULO: Excepciones tipadas de infraestructura
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message para logs (el cliente recibe un mensaje genérico)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  DicriError + subclases

Responsabilidades:
  - Estandarizar errores de infraestructura que luego se mapean a HTTP 500
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a la respuesta genérica)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class DicriError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      DicriError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "DICRI_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(DicriError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class SigningKeyMissingError(DicriError):
    """No hay clave para firmar/verificar sesiones (configuración fatal)."""

    error_code: str = "CONFIGURATION_ERROR"

    def __init__(self, message: str = "JWT_SECRET no está configurado."):
        super().__init__(message)
