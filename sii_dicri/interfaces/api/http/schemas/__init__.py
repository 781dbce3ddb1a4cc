"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Módulo:
    Paquete de Schemas HTTP (DTOs Pydantic)

Responsabilidades:
    - Agrupar contratos HTTP por contexto (auth/expedientes/indicios/
      catálogos/usuarios).
    - Mantener separados DTOs (schemas) de controladores (routers).

Reglas:
    - Schemas NO importan infraestructura ni ejecutan casos de uso.
    - JSON en camelCase (alias_generator); en Python, snake_case.
===============================================================================
"""

__all__ = []
