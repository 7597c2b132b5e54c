"""
===============================================================================
TARJETA CRC - identity/tokens.py
===============================================================================

Módulo:
    TokenService (JWT HS256 de acceso)

Responsabilidades:
    - Emitir tokens firmados con expiración absoluta (iat + TTL).
    - Verificar firma, estructura y expiración sin I/O (función pura).
    - Clasificar fallas: MALFORMED | INVALID_SIGNATURE | EXPIRED.

Colaboradores:
    - container.py: construye el servicio una vez con Settings.jwt_secret.
    - identity.access_control: authenticate(token).
    - api/auth_routes.py: emite tokens en register/login.

Limitación conocida:
    - Los tokens NO se revocan. Logout no tiene efecto server-side y un token
      robado sigue siendo válido hasta su exp. Desactivar al usuario sí corta
      el acceso porque AccessControlGate relee el usuario en cada request.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable
from uuid import UUID

import jwt

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"


class TokenErrorKind(str, Enum):
    MALFORMED = "MALFORMED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    EXPIRED = "EXPIRED"


class TokenError(Exception):
    """Falla de verificación; kind indica la causa (solo para logs/métricas)."""

    def __init__(self, kind: TokenErrorKind, message: str = ""):
        self.kind = kind
        super().__init__(message or kind.value)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ValueError("secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, user_id: UUID) -> IssuedToken:
        issued_at = self._clock()
        expires_at = issued_at + timedelta(seconds=self._ttl_seconds)
        payload: dict[str, object] = {
            CLAIM_SUB: str(user_id),
            CLAIM_IAT: int(issued_at.timestamp()),
            CLAIM_EXP: int(expires_at.timestamp()),
            CLAIM_TYP: TOKEN_TYPE_ACCESS,
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(
            token=token, expires_in=self._ttl_seconds, expires_at=expires_at
        )

    def verify(self, token: str) -> UUID:
        """
        Devuelve el user_id del token.

        Orden: PyJWT valida firma antes que claims, así que un token vencido
        con firma inválida se reporta como INVALID_SIGNATURE.
        """
        if not token or not isinstance(token, str):
            raise TokenError(TokenErrorKind.MALFORMED, "Token vacío.")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": [CLAIM_SUB, CLAIM_EXP, CLAIM_IAT]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenError(TokenErrorKind.EXPIRED, "Token expirado.") from exc
        except jwt.InvalidSignatureError as exc:
            raise TokenError(
                TokenErrorKind.INVALID_SIGNATURE, "Firma inválida."
            ) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError(TokenErrorKind.MALFORMED, "Token inválido.") from exc

        if payload.get(CLAIM_TYP) != TOKEN_TYPE_ACCESS:
            raise TokenError(TokenErrorKind.MALFORMED, "Tipo de token inválido.")

        try:
            return UUID(str(payload[CLAIM_SUB]))
        except ValueError as exc:
            raise TokenError(TokenErrorKind.MALFORMED, "Token inválido.") from exc
