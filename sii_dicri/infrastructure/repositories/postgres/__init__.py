"""PostgreSQL repository implementations (psycopg 3, SQL crudo)."""

from .catalog import PostgresCatalogRepository
from .expediente import PostgresExpedienteRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresCatalogRepository",
    "PostgresExpedienteRepository",
    "PostgresUserRepository",
]
