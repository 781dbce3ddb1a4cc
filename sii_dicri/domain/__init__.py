"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Evitar imports profundos y acoplamientos innecesarios.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    CatalogEntry,
    EstadoExpediente,
    Expediente,
    Indicio,
    Role,
    User,
    UserRole,
)
from .errors import DomainRuleViolation, RuleErrorCode
from .repositories import (
    CatalogRepository,
    ExpedienteRepository,
    UserRepository,
    UserWriteSession,
)

__all__ = [
    "CatalogEntry",
    "CatalogRepository",
    "DomainRuleViolation",
    "EstadoExpediente",
    "Expediente",
    "ExpedienteRepository",
    "Indicio",
    "Role",
    "RuleErrorCode",
    "User",
    "UserRepository",
    "UserRole",
    "UserWriteSession",
]
