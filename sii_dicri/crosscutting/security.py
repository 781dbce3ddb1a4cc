"""
===============================================================================
MÓDULO: Security headers
===============================================================================

Objetivo
--------
Agregar headers de hardening a todas las respuestas de la API JSON.
La API no sirve HTML propio (salvo /docs en desarrollo), así que la CSP
de producción es restrictiva.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  SecurityHeadersMiddleware

Responsabilidades:
  - Añadir headers anti-sniffing, anti-clickjacking y referrer policy
  - Ajustar CSP según entorno (Swagger UI necesita inline en dev)

Colaboradores:
  - crosscutting.config.get_settings
===============================================================================
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_CSP_PRODUCTION = "default-src 'none'; frame-ancestors 'none'"

_CSP_DEVELOPMENT = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "frame-ancestors 'none'"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Agrega headers de seguridad; HSTS solo en producción detrás de HTTPS."""

    def __init__(self, app, is_production: bool | None = None):
        super().__init__(app)
        if is_production is None:
            from .config import get_settings

            is_production = get_settings().is_production()
        self._is_production = is_production
        self._csp = _CSP_PRODUCTION if is_production else _CSP_DEVELOPMENT

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cache-Control"] = "no-store"
        response.headers["Content-Security-Policy"] = self._csp

        if self._is_production:
            proto = (
                request.headers.get("x-forwarded-proto") or request.url.scheme or ""
            ).lower()
            if proto == "https":
                response.headers["Strict-Transport-Security"] = (
                    "max-age=31536000; includeSubDomains"
                )

        return response
