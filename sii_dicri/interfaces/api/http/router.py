"""
===============================================================================
TARJETA CRC — router.py (Router raíz de negocio)
===============================================================================

Responsabilidades:
  - Agrupar los routers de negocio en un único APIRouter.
  - Declarar las respuestas de error comunes para OpenAPI.

Notas:
  - Se incluye desde sii_dicri/api/main.py sin prefijo.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.catalogos import router as catalogos_router
from .routers.expedientes import router as expedientes_router
from .routers.indicios import router as indicios_router
from .routers.usuarios import router as usuarios_router


def build_router() -> APIRouter:
    """Construye el router raíz (facilita tests: build_router() incluye todo)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(expedientes_router)
    api_router.include_router(indicios_router)
    api_router.include_router(catalogos_router)
    api_router.include_router(usuarios_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
