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
    - Cuidar cardinalidad: endpoint = template de la ruta (/posts/{post_id}),
      "unmatched" si ninguna ruta matcheó; nunca el path crudo ni user_id.
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: latencia y conteo HTTP.
    - identity.access_control: resultados de autenticación.
    - identity.passwords: duración de hash/verify Argon2.
===============================================================================
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "postboard_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "postboard_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

_auth_outcomes_total = Counter(
    "postboard_auth_outcomes_total",
    "Resultados de autenticación/autorización",
    ["stage", "outcome"],
    registry=_registry,
)

_password_hash_latency = Histogram(
    "postboard_password_hash_seconds",
    "Duración de operaciones Argon2 (segundos)",
    ["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=_registry,
)


def record_request_metrics(
    endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    _requests_total.labels(
        endpoint=endpoint, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=endpoint, method=method).observe(
        latency_seconds
    )


def record_auth_outcome(stage: str, outcome: str) -> None:
    """stage: authenticate|role|ownership|login ; outcome: ok|denied."""
    _auth_outcomes_total.labels(stage=stage, outcome=outcome).inc()


def observe_password_hash_duration(operation: str, seconds: float) -> None:
    _password_hash_latency.labels(operation=operation).observe(seconds)


UNMATCHED_ENDPOINT = "unmatched"


def route_label(scope) -> str:
    """Template de la ruta que atendió el request (FastAPI deja scope["route"])."""
    route = scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 300 <= code < 400:
        return "3xx"
    if 400 <= code < 500:
        return "4xx"
    return "5xx"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
