"""
===============================================================================
TARJETA CRC - error_mapping.py (DomainError -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir DomainErrorCode a AppHTTPException RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Mapeo:
  - VALIDATION_ERROR -> 400 (errors[] por campo)
  - DUPLICATE_EMAIL  -> 409
  - UNAUTHENTICATED  -> 401 (mensaje genérico + WWW-Authenticate)
  - FORBIDDEN        -> 403
  - NOT_FOUND        -> 404
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn
from uuid import UUID

from postboard.crosscutting.error_responses import (
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)
from postboard.domain.errors import DomainError, DomainErrorCode


def raise_domain_error(error: DomainError, *, resource_id: UUID | None = None) -> NoReturn:
    if error.code == DomainErrorCode.VALIDATION_ERROR:
        raise validation_error(
            error.message, [fe.to_dict() for fe in error.field_errors] or None
        )
    if error.code == DomainErrorCode.DUPLICATE_EMAIL:
        raise conflict(error.message)
    if error.code == DomainErrorCode.UNAUTHENTICATED:
        raise unauthorized(error.message)
    if error.code == DomainErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == DomainErrorCode.NOT_FOUND:
        raise not_found(error.resource or "Recurso", str(resource_id or "unknown"))

    # Fallback seguro: código nuevo sin mapeo explícito
    raise validation_error(error.message)
