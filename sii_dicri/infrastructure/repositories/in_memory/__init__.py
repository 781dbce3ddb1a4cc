"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .catalog import InMemoryCatalogRepository
from .expediente import InMemoryExpedienteRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryCatalogRepository",
    "InMemoryExpedienteRepository",
    "InMemoryUserRepository",
]
