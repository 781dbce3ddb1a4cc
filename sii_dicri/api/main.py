"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Inicializar la app FastAPI (título, versión, lifespan)
  - Configurar middlewares (body limit, security headers, request context, CORS)
  - Montar los routers de negocio y de autenticación
  - Exponer /healthz y /metrics

Collaborators:
  - FastAPI / CORSMiddleware
  - crosscutting.middleware: RequestContextMiddleware, BodyLimitMiddleware
  - crosscutting.security: SecurityHeadersMiddleware
  - interfaces.api.http.router: expedientes, indicios, catálogos, usuarios
  - api.auth_routes: /auth/login, /auth/me
  - container: estado de la base y cierre del pool

Constraints:
  - CORS configurable vía ALLOWED_ORIGINS (separado por comas)
  - Las rutas de negocio no llevan prefijo de versión (contrato del frontend)

Notes:
  - Orden de middlewares (el último agregado se ejecuta primero):
    CORS -> RequestContext -> SecurityHeaders -> BodyLimit -> rutas
  - El pool de conexiones se abre perezosamente en el primer uso y se
    cierra en el shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import close_db_pool, database_status
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import not_found
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..identity.auth_users import ensure_signing_key
from ..interfaces.api.http.router import build_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup/shutdown lifecycle.

    Sin JWT_SECRET el arranque falla (SigningKeyMissingError): la API no
    llega a servir requests que después responderían 500.
    """
    settings = get_settings()
    ensure_signing_key()
    try:
        logger.info(
            "SII DICRI API starting up",
            extra={
                "app_env": settings.app_env,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "metrics_enabled": settings.metrics_enabled,
            },
        )
        yield
    finally:
        close_db_pool()
        logger.info("SII DICRI API shutting down")


app = FastAPI(
    title="SII DICRI API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Inicio de sesión (JWT)"},
        {"name": "expedientes", "description": "Expedientes y flujo de revisión"},
        {"name": "indicios", "description": "Indicios de un expediente"},
        {"name": "catalogos", "description": "Fiscalías y tipos de caso"},
        {"name": "usuarios", "description": "Administración de usuarios (ADMIN)"},
    ],
)

app.add_middleware(BodyLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestContextMiddleware)

_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_allowed_origins_list(),
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    expose_headers=["X-Request-Id"],
)

app.include_router(build_router())
app.include_router(auth_router)

register_exception_handlers(app)


@app.get("/healthz", tags=["ops"])
def healthz(request: Request):
    """
    Returns:
        ok: True si la base responde (o corre in-memory)
        db: "connected", "disconnected" o "in-memory"
        requestId: Correlation ID
    """
    try:
        db_status = database_status()
    except Exception as e:
        logger.warning("Health check: DB unavailable", extra={"error": str(e)})
        db_status = "disconnected"

    return {
        "ok": db_status != "disconnected",
        "db": db_status,
        "requestId": getattr(request.state, "request_id", None),
    }


@app.get("/metrics", tags=["ops"])
def metrics():
    """Métricas Prometheus (texto plano)."""
    if not get_settings().metrics_enabled:
        raise not_found("Métricas deshabilitadas.")
    content, media_type = get_metrics_response()
    return Response(content=content, media_type=media_type)
