"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus)

Responsabilidades:
    - Definir métricas Prometheus en un registry propio.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO id de usuario, NO id de expediente).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - application.usecases.expedientes.change_estado: cuenta transiciones.
    - api.main: endpoint /metrics.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "dicri_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "dicri_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

_transitions_total = Counter(
    "dicri_expediente_transitions_total",
    "Cambios de estado de expedientes solicitados",
    ["origen", "destino", "resultado"],
    registry=_registry,
)

_login_total = Counter(
    "dicri_login_total",
    "Intentos de login por resultado",
    ["resultado"],
    registry=_registry,
)

# Ids numéricos en paths -> placeholder (evita explosión de cardinalidad).
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalize_endpoint(path: str) -> str:
    """`/expedientes/15/estado` -> `/expedientes/{id}/estado`."""
    return _NUMERIC_SEGMENT.sub("/{id}", path or "/")


def record_request_metrics(
    *, endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    normalized = normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=str(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_transition(origen: str, destino: str, resultado: str) -> None:
    """resultado: ok o el código de la regla violada (forbidden, conflict...)."""
    _transitions_total.labels(origen=origen, destino=destino, resultado=resultado).inc()


def record_login(resultado: str) -> None:
    _login_total.labels(resultado=resultado).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Devuelve (payload, content_type) para el endpoint /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
