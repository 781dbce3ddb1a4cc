"""Acceso a PostgreSQL: pool de conexiones y errores tipados."""

from .errors import DatabaseConnectionError, DatabasePoolError, PoolClosedError
from .pool import DatabasePool

__all__ = [
    "DatabaseConnectionError",
    "DatabasePool",
    "DatabasePoolError",
    "PoolClosedError",
]
