"""
===============================================================================
TARJETA CRC - identity/credentials.py
===============================================================================

Módulo:
    CredentialStore (dueño de la entidad User)

Responsabilidades:
    - Registrar usuarios: validar -> normalizar email -> chequear unicidad ->
      hashear (paso explícito) -> persistir con role=user, is_active=True.
    - Autenticar credenciales de login con mensaje genérico (no distingue
      "usuario inexistente" de "password incorrecta" ni de "inactivo").
    - Activar/desactivar usuarios (operación de operador, sin endpoint).

Colaboradores:
    - domain.repositories.UserRepository (puerto de persistencia)
    - identity.passwords.PasswordService (Argon2 en executor dedicado)
    - domain.validation (validadores explícitos)

Resultados:
    - Devuelve CredentialResult(user, error) en lugar de lanzar hacia afuera.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_auth_outcome
from ..domain.entities import utcnow
from ..domain.errors import DomainError, DomainErrorCode, EmailAlreadyExistsError
from ..domain.repositories import UserRepository
from ..domain.validation import normalize_email, validate_login, validate_registration
from .passwords import PasswordService
from .users import User, UserRole

INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas."
DUPLICATE_EMAIL_MESSAGE = "El email ya está registrado."


@dataclass
class CredentialResult:
    """
    Contrato:
      - error is None => user presente
      - error != None => user None
    """

    user: User | None = None
    error: DomainError | None = None


def _duplicate_email() -> CredentialResult:
    return CredentialResult(
        error=DomainError(DomainErrorCode.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MESSAGE)
    )


def _invalid_credentials() -> CredentialResult:
    return CredentialResult(
        error=DomainError(DomainErrorCode.UNAUTHENTICATED, INVALID_CREDENTIALS_MESSAGE)
    )


class CredentialStore:
    def __init__(self, users: UserRepository, passwords: PasswordService):
        self._users = users
        self._passwords = passwords

    # ------------------------------------------------------------------
    # Registro
    # ------------------------------------------------------------------
    async def register(
        self,
        name: str,
        email: str,
        password: str,
        *,
        role: UserRole = UserRole.USER,
    ) -> CredentialResult:
        errors = validate_registration(name, email, password)
        if errors:
            return CredentialResult(error=DomainError.validation(errors))

        normalized_email = normalize_email(email)
        if self._users.get_user_by_email(normalized_email) is not None:
            logger.info("Registro rechazado: email duplicado")
            return _duplicate_email()

        password_hash = await self._passwords.hash_async(password)
        now = utcnow()
        candidate = User(
            id=uuid4(),
            name=name.strip(),
            email=normalized_email,
            password_hash=password_hash,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

        try:
            user = self._users.create_user(candidate)
        except EmailAlreadyExistsError:
            # R: carrera entre el chequeo previo y el INSERT (unique index).
            logger.info("Registro rechazado: email duplicado (storage)")
            return _duplicate_email()

        logger.info("Usuario registrado", extra={"user_id": str(user.id)})
        return CredentialResult(user=user)

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    def find_by_email(self, email: str) -> User | None:
        normalized_email = normalize_email(email)
        if not normalized_email:
            return None
        return self._users.get_user_by_email(normalized_email)

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get_user_by_id(user_id)

    def verify_password(self, plaintext: str | None, password_hash: str | None) -> bool:
        return self._passwords.verify(plaintext, password_hash)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------
    async def authenticate(self, email: str, password: str) -> CredentialResult:
        errors = validate_login(email, password)
        if errors:
            return CredentialResult(error=DomainError.validation(errors))

        user = self.find_by_email(email)
        if user is None:
            await self._passwords.dummy_verify_async(password)
            record_auth_outcome("login", "denied")
            return _invalid_credentials()

        password_ok = await self._passwords.verify_async(password, user.password_hash)
        if not password_ok or not user.is_active:
            if password_ok:
                logger.warning(
                    "Login rechazado: usuario inactivo",
                    extra={"user_id": str(user.id)},
                )
            record_auth_outcome("login", "denied")
            return _invalid_credentials()

        record_auth_outcome("login", "ok")
        return CredentialResult(user=user)

    # ------------------------------------------------------------------
    # Administración
    # ------------------------------------------------------------------
    def set_active(self, user_id: UUID, is_active: bool) -> CredentialResult:
        user = self._users.set_user_active(user_id, is_active)
        if user is None:
            return CredentialResult(error=DomainError.not_found("Usuario"))
        logger.info(
            "Usuario actualizado",
            extra={"user_id": str(user.id), "is_active": is_active},
        )
        return CredentialResult(user=user)

    def promote_to_admin(self, user_id: UUID) -> CredentialResult:
        user = self._users.set_user_role(user_id, UserRole.ADMIN.value)
        if user is None:
            return CredentialResult(error=DomainError.not_found("Usuario"))
        return CredentialResult(user=user)
