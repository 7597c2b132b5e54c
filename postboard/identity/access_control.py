"""
===============================================================================
TARJETA CRC - identity/access_control.py
===============================================================================

Módulo:
    AccessControlGate (autenticación + autorización por request)

Responsabilidades:
    - authenticate(token): verificar token -> cargar usuario vivo -> rechazar
      inexistentes o inactivos.
    - authorize_role(requester, role): RBAC.
    - authorize_ownership(requester, author_id): admin o autor.
    - evaluate(token, *checks): pipeline ordenado y explícito
      (authenticate -> checks de rol -> checks de ownership), cortando en la
      primera decisión negativa.

Colaboradores:
    - identity.tokens.TokenService
    - domain.repositories.UserRepository
    - domain.post_policy (reglas puras)
    - identity.dependencies (adaptadores FastAPI)

Notas:
    - Todas las fallas de autenticación producen el MISMO mensaje genérico;
      la causa real solo va a logs/métricas.
    - Cada paso devuelve un resultado tipado; nada se "cortocircuita" por
      efectos colaterales.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable
from uuid import UUID

from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_auth_outcome
from ..domain.errors import DomainError, DomainErrorCode
from ..domain.post_policy import Requester, can_modify_post, has_role
from ..domain.repositories import UserRepository
from .tokens import TokenError, TokenService
from .users import User, UserRole

UNAUTHENTICATED_MESSAGE = "Token inválido o expirado."
ROLE_FORBIDDEN_MESSAGE = "Rol insuficiente."
OWNERSHIP_FORBIDDEN_MESSAGE = "No autorizado para modificar este recurso."


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    error: DomainError | None = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str) -> "AccessDecision":
        return cls(
            allowed=False, error=DomainError(DomainErrorCode.FORBIDDEN, message)
        )


@dataclass
class AuthResult:
    user: User | None = None
    error: DomainError | None = None


class CheckStage(IntEnum):
    """Orden de evaluación en el pipeline."""

    ROLE = 1
    OWNERSHIP = 2


@dataclass(frozen=True)
class AuthorizationCheck:
    stage: CheckStage
    name: str
    predicate: Callable[[Requester], AccessDecision]


def _unauthenticated() -> AuthResult:
    return AuthResult(
        error=DomainError(DomainErrorCode.UNAUTHENTICATED, UNAUTHENTICATED_MESSAGE)
    )


class AccessControlGate:
    def __init__(self, tokens: TokenService, users: UserRepository):
        self._tokens = tokens
        self._users = users

    # ------------------------------------------------------------------
    # 1) Autenticación
    # ------------------------------------------------------------------
    def authenticate(self, token: str | None) -> AuthResult:
        if not token:
            record_auth_outcome("authenticate", "denied")
            return _unauthenticated()

        try:
            user_id = self._tokens.verify(token)
        except TokenError as exc:
            logger.info("Token rechazado", extra={"reason": exc.kind.value})
            record_auth_outcome("authenticate", "denied")
            return _unauthenticated()

        user = self._users.get_user_by_id(user_id)
        if user is None:
            logger.info("Token de usuario inexistente", extra={"user_id": str(user_id)})
            record_auth_outcome("authenticate", "denied")
            return _unauthenticated()
        if not user.is_active:
            logger.info("Token de usuario inactivo", extra={"user_id": str(user_id)})
            record_auth_outcome("authenticate", "denied")
            return _unauthenticated()

        record_auth_outcome("authenticate", "ok")
        return AuthResult(user=user)

    # ------------------------------------------------------------------
    # 2) Rol
    # ------------------------------------------------------------------
    def authorize_role(
        self, requester: Requester, required_role: UserRole
    ) -> AccessDecision:
        if has_role(requester, required_role):
            return AccessDecision.allow()
        record_auth_outcome("role", "denied")
        return AccessDecision.deny(ROLE_FORBIDDEN_MESSAGE)

    # ------------------------------------------------------------------
    # 3) Ownership
    # ------------------------------------------------------------------
    def authorize_ownership(
        self, requester: Requester, resource_author_id: UUID
    ) -> AccessDecision:
        if can_modify_post(requester, resource_author_id):
            return AccessDecision.allow()
        record_auth_outcome("ownership", "denied")
        return AccessDecision.deny(OWNERSHIP_FORBIDDEN_MESSAGE)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def role_check(self, required_role: UserRole) -> AuthorizationCheck:
        return AuthorizationCheck(
            stage=CheckStage.ROLE,
            name=f"role:{required_role.value}",
            predicate=lambda requester: self.authorize_role(requester, required_role),
        )

    def ownership_check(self, resource_author_id: UUID) -> AuthorizationCheck:
        return AuthorizationCheck(
            stage=CheckStage.OWNERSHIP,
            name="ownership",
            predicate=lambda requester: self.authorize_ownership(
                requester, resource_author_id
            ),
        )

    def authorize(
        self, requester: Requester, *checks: AuthorizationCheck
    ) -> AccessDecision:
        """Evalúa checks por etapa (rol antes que ownership); corta en el primer deny."""
        for check in sorted(checks, key=lambda c: c.stage):
            decision = check.predicate(requester)
            if not decision.allowed:
                logger.info("Acceso denegado", extra={"check": check.name})
                return decision
        return AccessDecision.allow()

    def evaluate(self, token: str | None, *checks: AuthorizationCheck) -> AuthResult:
        auth = self.authenticate(token)
        if auth.error is not None or auth.user is None:
            return auth

        decision = self.authorize(Requester.from_user(auth.user), *checks)
        if not decision.allowed:
            return AuthResult(error=decision.error)
        return auth
