"""
===============================================================================
MÓDULO: Middlewares HTTP de postboard-api
===============================================================================

RequestContextMiddleware
  - Acepta X-Request-Id del cliente (si es razonable) o genera uno nuevo.
  - Carga el contexto de logging y lo limpia al terminar.
  - Registra access log + métricas Prometheus por request.

BodyLimitMiddleware (ASGI puro)
  - Corta bodies que superan MAX_BODY_BYTES, tanto por Content-Length como
    contando bytes en streaming (multipart chunked).
  - Responde 413 en formato problem+json.

Colaboradores:
  - postboard/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, ErrorDetail
from .logger import logger
from .metrics import record_request_metrics, route_label

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LEN = 128
_UNLOGGED_PATHS = frozenset({"/health", "/metrics"})


def _request_id_from_header(value: str | None) -> str:
    candidate = (value or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_LEN:
        return candidate
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request abortado por excepción")
            raise
        else:
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            elapsed = time.perf_counter() - started
            record_request_metrics(
                endpoint=route_label(request.scope),
                method=request.method,
                status_code=status_code,
                latency_seconds=elapsed,
            )
            if request.url.path not in _UNLOGGED_PATHS:
                logger.info(
                    "%s %s -> %s",
                    request.method,
                    request.url.path,
                    status_code,
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(elapsed * 1000, 2),
                    },
                )
            clear_context()


class _PayloadTooLarge(Exception):
    pass


def _declared_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", ()):
        if name.lower() == b"content-length":
            raw = value.decode("latin-1").strip()
            return int(raw) if raw.isdigit() else None
    return None


class BodyLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: int | None = None) -> None:
        if max_bytes is None:
            from .config import get_settings

            max_bytes = get_settings().max_body_bytes
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_bytes:
            logger.warning(
                "Body rechazado por Content-Length",
                extra={"content_length": declared, "max_bytes": self.max_bytes},
            )
            await self._reject(scope, send)
            return

        consumed = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal consumed
            message = await receive()
            if message["type"] == "http.request":
                consumed += len(message.get("body") or b"")
                if consumed > self.max_bytes:
                    raise _PayloadTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _PayloadTooLarge:
            # R: con la respuesta ya iniciada no se puede mandar otra.
            if response_started:
                raise
            logger.warning(
                "Body rechazado en streaming",
                extra={"received_bytes": consumed, "max_bytes": self.max_bytes},
            )
            await self._reject(scope, send)

    async def _reject(self, scope: Scope, send: Send) -> None:
        body = (
            ErrorDetail(
                type="about:blank/payload_too_large",
                title="Payload Too Large",
                status=413,
                detail=f"El body supera el máximo de {self.max_bytes} bytes.",
                code=ErrorCode.PAYLOAD_TOO_LARGE,
                instance=scope.get("path"),
            )
            .model_dump_json(exclude_none=True)
            .encode("utf-8")
        )
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", PROBLEM_JSON_MEDIA_TYPE.encode()),
                    (b"content-length", str(len(body)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
