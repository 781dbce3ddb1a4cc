"""
============================================================
TARJETA CRC
============================================================
Class: sii_dicri.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo, transacciones)
- Repositorios InMemory (testing / desarrollo local)
============================================================
"""

from .in_memory import (
    InMemoryCatalogRepository,
    InMemoryExpedienteRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresCatalogRepository,
    PostgresExpedienteRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresCatalogRepository",
    "PostgresExpedienteRepository",
    "PostgresUserRepository",
    # In-memory
    "InMemoryCatalogRepository",
    "InMemoryExpedienteRepository",
    "InMemoryUserRepository",
]
