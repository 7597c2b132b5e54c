"""
===============================================================================
MÓDULO: Errores HTTP como Problem Details (RFC 7807)
===============================================================================

Objetivo
--------
Un único formato de error para toda la API:
- `code` estable para que el cliente decida sin parsear mensajes
- `errors[]` con detalle por campo ({field, message}) en validaciones
- 401 siempre con `WWW-Authenticate: Bearer` y mensaje genérico

Componente:
  ErrorCode + ErrorDetail + AppHTTPException + factories + handler

Colaboradores:
  - crosscutting/middleware.py (request_id, 413 del body limit)
  - api/exception_handlers.py (errores internos y de parseo)
  - interfaces/api/http/error_mapping.py (errores de dominio)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorDetail(BaseModel):
    """Cuerpo problem+json; `code` y `errors` son extensiones propias."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {
        "description": f"{label} (RFC 7807)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for status, label in (
        ("400", "Datos inválidos"),
        ("401", "No autenticado"),
        ("403", "Sin permisos"),
        ("404", "No encontrado"),
        ("409", "Conflicto"),
        ("413", "Payload demasiado grande"),
        ("default", "Error"),
    )
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode y errores por campo opcionales."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def unauthorized(detail: str = "Autenticación requerida.") -> AppHTTPException:
    return AppHTTPException(
        401, ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str = "No tenés permisos para esta operación.") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        404, ErrorCode.NOT_FOUND, f"{resource} '{identifier}' no encontrado."
    )


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def payload_too_large(max_size: str) -> AppHTTPException:
    return AppHTTPException(
        413, ErrorCode.PAYLOAD_TOO_LARGE, f"El archivo supera el máximo ({max_size})."
    )


def service_unavailable(service: str) -> AppHTTPException:
    return AppHTTPException(
        503, ErrorCode.SERVICE_UNAVAILABLE, f"{service} no disponible temporalmente."
    )


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Renderiza AppHTTPException; agrega request_id a errors[] si existe."""
    errors = list(exc.errors or [])
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        errors.append({"request_id": request_id})

    problem = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(mode="json", exclude_none=True),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
