"""
===============================================================================
TARJETA CRC - crosscutting/security.py (headers de respuesta)
===============================================================================

Responsabilidades:
  - Estampar headers de hardening en cada respuesta de postboard-api.
  - Elegir la Content-Security-Policy según el entorno: /docs en dev
    necesita scripts inline y el CDN de Swagger UI.
  - Strict-Transport-Security únicamente en producción y sobre https
    (directo o vía X-Forwarded-Proto del proxy).

Colaboradores:
  - crosscutting.config (APP_ENV)
  - api/main.py (registro del middleware)
===============================================================================
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HSTS_VALUE = "max-age=31536000; includeSubDomains"
_SWAGGER_CDN = "https://cdn.jsdelivr.net"


def _csp(*, allow_docs_assets: bool) -> str:
    extra = f" 'unsafe-inline' {_SWAGGER_CDN}" if allow_docs_assets else ""
    directives = {
        "default-src": "'self'",
        "script-src": "'self'" + extra,
        "style-src": "'self'" + extra,
        # imágenes de posts servidas desde el bucket (URLs prefirmadas)
        "img-src": "'self' data: https:",
        "font-src": "'self'",
        "connect-src": "'self'",
    }
    return "; ".join(f"{name} {value}" for name, value in directives.items())


def _is_https(request: Request) -> bool:
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    return (proto or "").split(",")[0].strip().lower() == "https"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, is_production: bool | None = None):
        super().__init__(app)
        if is_production is None:
            from .config import get_settings

            is_production = get_settings().is_production()
        self.is_production = is_production
        self.headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "strict-origin-when-cross-origin",
            "Content-Security-Policy": _csp(allow_docs_assets=not is_production),
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        if self.is_production and _is_https(request):
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response
