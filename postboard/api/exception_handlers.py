"""
===============================================================================
TARJETA CRC - postboard/api/exception_handlers.py
===============================================================================

Responsabilidades:
  - Convertir toda excepción que llegue al borde HTTP en problem+json.
  - Errores de parseo de FastAPI -> 400 con el mismo shape que la validación
    de dominio ([{field, message}]).
  - Errores internos (DB, inesperados) -> 500 con error_id; el detalle real
    solo se muestra fuera de producción.

Colaboradores:
  - crosscutting.error_responses (AppHTTPException, ErrorCode, handler base)
  - crosscutting.exceptions (PostboardError, DatabaseError)
  - crosscutting.config (APP_ENV)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import DatabaseError, PostboardError
from ..crosscutting.logger import logger

INTERNAL_ERROR_DETAIL = "Error interno."
_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


def _client_detail(message: str) -> str:
    if get_settings().is_production():
        return INTERNAL_ERROR_DETAIL
    return message


async def _server_error(
    request: Request,
    exc: Exception,
    *,
    code: ErrorCode,
    message: str,
    error_id: str,
) -> JSONResponse:
    logger.error(
        "Falla interna atendiendo request",
        exc_info=exc,
        extra={"code": code.value, "error_id": error_id, "error": message},
    )
    return await app_exception_handler(
        request,
        AppHTTPException(
            500, code, _client_detail(message), errors=[{"error_id": error_id}]
        ),
    )


async def postboard_error_handler(request: Request, exc: PostboardError) -> JSONResponse:
    code = (
        ErrorCode.DATABASE_ERROR
        if isinstance(exc, DatabaseError)
        else ErrorCode.INTERNAL_ERROR
    )
    return await _server_error(
        request,
        exc.original_error or exc,
        code=code,
        message=exc.message,
        error_id=exc.error_id,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return await _server_error(
        request,
        exc,
        code=ErrorCode.INTERNAL_ERROR,
        message=str(exc) or type(exc).__name__,
        error_id=uuid4().hex,
    )


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in _REQUEST_PARTS]
    return ".".join(parts) or "request"


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Inválido")}
        for err in exc.errors()
    ]
    return await app_exception_handler(
        request, AppHTTPException(400, ErrorCode.VALIDATION_ERROR, "Datos inválidos.", errors)
    )


def register_exception_handlers(app: FastAPI) -> None:
    # R: Exception va último; Starlette lo atiende en ServerErrorMiddleware.
    app.add_exception_handler(PostboardError, postboard_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
