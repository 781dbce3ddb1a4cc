"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del Pool/Conectividad

Responsabilidades:
  - Evitar RuntimeError genéricos.
  - Dar semántica clara: "pool cerrado", "no se pudo conectar".
  - Heredar de DatabaseError para que la API responda 500 genérico.
===============================================================================
"""

from ...crosscutting.exceptions import DatabaseError


class DatabasePoolError(DatabaseError):
    """Base de errores de pool de base de datos."""

    error_code: str = "DATABASE_POOL_ERROR"


class PoolClosedError(DatabasePoolError):
    """Se intentó usar un pool cerrado explícitamente (shutdown)."""


class DatabaseConnectionError(DatabasePoolError):
    """Error al abrir el pool o adquirir/validar una conexión."""
