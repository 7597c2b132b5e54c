"""
===============================================================================
TARJETA CRC - postboard/api/auth_routes.py (Autenticación de usuarios)
===============================================================================

Responsabilidades:
  - Exponer registro, login, logout y "me" con JWT Bearer.
  - Traducir CredentialResult a HTTP (error_mapping) y emitir el token.
  - Mantener mensajes genéricos en login (no filtrar existencia de cuentas).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP ↔ CredentialStore/TokenService.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - identity.credentials.CredentialStore
  - identity.tokens.TokenService
  - identity.dependencies.require_user
  - interfaces.api.http.error_mapping.raise_domain_error
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..container import get_credential_store, get_token_service
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..crosscutting.logger import logger
from ..identity.credentials import CredentialStore
from ..identity.dependencies import require_user
from ..identity.tokens import TokenService
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_domain_error
from ..interfaces.api.http.schemas import UserRes, to_user_res

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------
# R: Los límites de negocio (longitudes mínimas, formato de email) los aplica
#    domain.validation; acá solo acotamos tamaños absurdos.


class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=512)
    email: str = Field(..., max_length=512)
    password: str = Field(..., max_length=512)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=512)
    password: str = Field(..., max_length=512)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRes


class LogoutResponse(BaseModel):
    ok: bool = True


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    issued = tokens.issue(user.id)
    return AuthResponse(
        access_token=issued.token,
        expires_in=issued.expires_in,
        user=to_user_res(user),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post(
    "/auth/register", response_model=AuthResponse, status_code=201, tags=["auth"]
)
async def register(
    req: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Registra un usuario (role=user) y devuelve un token de acceso."""
    result = await store.register(req.name, req.email, req.password)
    if result.error is not None:
        raise_domain_error(result.error)
    return _auth_response(result.user, tokens)


@router.post("/auth/login", response_model=AuthResponse, tags=["auth"])
async def login(
    req: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Inicia sesión y devuelve JWT. 401 genérico ante cualquier falla."""
    result = await store.authenticate(req.email, req.password)
    if result.error is not None:
        raise_domain_error(result.error)
    logger.info("Login exitoso", extra={"user_id": str(result.user.id)})
    return _auth_response(result.user, tokens)


@router.post("/auth/logout", response_model=LogoutResponse, tags=["auth"])
async def logout(_user: User = Depends(require_user())):
    """
    Cierra sesión.

    - El token sigue siendo válido hasta su expiración (sin revocación).
    - El cliente debe descartarlo.
    """
    return LogoutResponse()


@router.get("/auth/me", response_model=UserRes, tags=["auth"])
async def me(user: User = Depends(require_user())):
    """Devuelve el usuario autenticado."""
    return to_user_res(user)
