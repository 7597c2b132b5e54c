"""
===============================================================================
TARJETA CRC - identity/dependencies.py
===============================================================================

Módulo:
    Dependencias FastAPI de autenticación/autorización

Responsabilidades:
    - Extraer el token desde `Authorization: Bearer <token>`.
    - Delegar en AccessControlGate.evaluate() y traducir el resultado a
      401/403 RFC7807.
    - Dejar el usuario en request.state.user y en el contexto de logs.

Colaboradores:
    - container.get_access_control_gate
    - crosscutting.error_responses (unauthorized/forbidden)
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..container import get_access_control_gate
from ..context import set_user_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..domain.errors import DomainErrorCode
from .access_control import AccessControlGate
from .users import User, UserRole


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def _resolve(
    request: Request,
    authorization: str | None,
    gate: AccessControlGate,
    required_role: UserRole | None,
) -> User:
    token = _extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Falta token Bearer.")

    checks = [gate.role_check(required_role)] if required_role else []
    result = gate.evaluate(token, *checks)

    if result.error is not None or result.user is None:
        if result.error is not None and result.error.code == DomainErrorCode.FORBIDDEN:
            raise forbidden(result.error.message)
        message = result.error.message if result.error else "Token inválido."
        raise unauthorized(message)

    request.state.user = result.user
    set_user_context(str(result.user.id))
    return result.user


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado y activo."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        gate: AccessControlGate = Depends(get_access_control_gate),
    ) -> User:
        return _resolve(request, authorization, gate, None)

    return dependency


def require_role(role: UserRole | str) -> Callable:
    """Dependency FastAPI: autentica y luego exige un rol específico."""
    required_role = UserRole(role)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        gate: AccessControlGate = Depends(get_access_control_gate),
    ) -> User:
        return _resolve(request, authorization, gate, required_role)

    return dependency


def require_admin() -> Callable:
    return require_role(UserRole.ADMIN)


def require_metrics_access() -> Callable:
    """/metrics: abierto salvo METRICS_REQUIRE_AUTH=true (entonces admin)."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        gate: AccessControlGate = Depends(get_access_control_gate),
    ) -> User | None:
        if not get_settings().metrics_require_auth:
            return None
        return _resolve(request, authorization, gate, UserRole.ADMIN)

    return dependency
