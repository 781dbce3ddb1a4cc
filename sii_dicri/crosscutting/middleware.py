"""
===============================================================================
MÓDULO: Middlewares HTTP (contexto + límites de payload)
===============================================================================

Objetivo
--------
1) RequestContextMiddleware:
   - Generar/propagar request_id
   - Setear contextvars (method/path)
   - Log y métricas por request

2) BodyLimitMiddleware:
   - Rechazar payloads más grandes que MAX_BODY_BYTES (incluye chunked)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - RequestContextMiddleware
  - BodyLimitMiddleware

Colaboradores:
  - sii_dicri/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import ErrorEnvelope, payload_too_large
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"


def _is_valid_request_id(value: str) -> bool:
    # Aceptamos UUIDs y también ids cortos razonables.
    return bool(value) and len(value) <= 128


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RequestContextMiddleware

    Responsabilidades:
      - Generar/aceptar X-Request-Id
      - Setear contextvars para correlación de logs
      - Emitir logs y métricas por request
      - Garantizar clear_context() para evitar leaks

    Colaboradores:
      - crosscutting.metrics.record_request_metrics
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = {"/healthz", "/metrics"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = incoming if _is_valid_request_id(incoming) else str(uuid.uuid4())

        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception(
                "request falló",
                extra={
                    "status_code": 500,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise
        finally:
            latency = time.perf_counter() - start
            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )

            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )

            clear_context()


class _BodyTooLarge(Exception):
    pass


class BodyLimitMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      BodyLimitMiddleware

    Responsabilidades:
      - Rechazar requests cuyo body exceda max_body_bytes
      - Funciona tanto con Content-Length como con transferencia chunked

    Colaboradores:
      - crosscutting.config.get_settings()
      - crosscutting.error_responses (sobre de error)
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, max_bytes: int | None = None):
        self.app = app
        if max_bytes is None:
            from .config import get_settings

            max_bytes = get_settings().max_body_bytes
        self._max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.decode().lower(): v.decode() for k, v in scope.get("headers", [])}
        path = scope.get("path", "")
        req_id = (headers.get("x-request-id") or "").strip() or str(uuid.uuid4())

        cl = headers.get("content-length")
        if cl and cl.isdigit() and int(cl) > self._max_bytes:
            logger.warning(
                "payload demasiado grande (por content-length)",
                extra={"content_length": cl, "max_bytes": self._max_bytes, "path": path},
            )
            await self._send_413(send, request_id=req_id)
            return

        started = False

        async def send_wrapper(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        received = 0

        async def receive_limited():
            nonlocal received
            msg = await receive()
            if msg["type"] == "http.request":
                received += len(msg.get("body", b"") or b"")
                if received > self._max_bytes:
                    raise _BodyTooLarge()
            return msg

        try:
            await self.app(scope, receive_limited, send_wrapper)
        except _BodyTooLarge:
            # Con la respuesta iniciada no se puede mandar otra.
            if started:
                logger.error(
                    "payload excedió límite luego de iniciar respuesta",
                    extra={"path": path},
                )
                raise
            logger.warning(
                "payload demasiado grande (streaming)",
                extra={"received_bytes": received, "max_bytes": self._max_bytes, "path": path},
            )
            await self._send_413(send, request_id=req_id)

    async def _send_413(self, send, *, request_id: str) -> None:
        exc = payload_too_large(self._max_bytes)
        envelope = ErrorEnvelope(
            mensaje=exc.detail, codigo=exc.code, request_id=request_id
        )
        body = json.dumps(envelope.to_content(), ensure_ascii=False).encode("utf-8")

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"x-request-id", request_id.encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
