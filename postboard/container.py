"""
===============================================================================
TARJETA CRC - postboard/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer repositorios, servicios de identidad y application services.
  - Exponer factories para FastAPI (Depends) y scripts.
  - Mantener singletons con caching (lru_cache); el secreto JWT se lee UNA vez.
  - Elegir adapters según entorno (in-memory en test; Postgres en runtime).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.* (implementaciones)
  - identity.* / application.*

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.post_store import PostStore
from .application.query_engine import QueryEngine
from .crosscutting.config import get_settings
from .domain.repositories import PostRepository, UserRepository
from .domain.services import FileStoragePort
from .identity.access_control import AccessControlGate
from .identity.credentials import CredentialStore
from .identity.passwords import PasswordService
from .identity.tokens import TokenService
from .infrastructure.repositories import (
    InMemoryPostRepository,
    InMemoryUserRepository,
    PostgresPostRepository,
    PostgresUserRepository,
)
from .infrastructure.storage import S3Config, S3ImageStorage


def _is_test_env() -> bool:
    """app_env ∈ {"test", "testing", "ci"} => in-memory adapters."""
    return get_settings().is_test()


def uses_postgres() -> bool:
    return not _is_test_env()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_post_repository() -> PostRepository:
    if _is_test_env():
        return InMemoryPostRepository()
    return PostgresPostRepository()


# =============================================================================
# Identidad
# =============================================================================


@lru_cache(maxsize=1)
def get_password_service() -> PasswordService:
    return PasswordService(max_workers=get_settings().password_hash_workers)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        ttl_seconds=settings.jwt_access_ttl_minutes * 60,
    )


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    return CredentialStore(get_user_repository(), get_password_service())


@lru_cache(maxsize=1)
def get_access_control_gate() -> AccessControlGate:
    return AccessControlGate(get_token_service(), get_user_repository())


# =============================================================================
# Application
# =============================================================================


@lru_cache(maxsize=1)
def get_query_engine() -> QueryEngine:
    return QueryEngine(
        get_user_repository(),
        get_post_repository(),
        all_records_limit=get_settings().all_records_limit,
    )


@lru_cache(maxsize=1)
def get_post_store() -> PostStore:
    return PostStore(get_post_repository(), get_access_control_gate())


# =============================================================================
# Storage (opcional)
# =============================================================================


@lru_cache(maxsize=1)
def get_image_storage() -> FileStoragePort | None:
    """None si S3 no está configurado (uploads responden 503)."""
    settings = get_settings()
    if not settings.storage_configured():
        return None
    return S3ImageStorage(
        S3Config(
            bucket=settings.s3_bucket,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region or None,
            endpoint_url=settings.s3_endpoint_url or None,
        )
    )


_CACHED_FACTORIES = (
    get_user_repository,
    get_post_repository,
    get_password_service,
    get_token_service,
    get_credential_store,
    get_access_control_gate,
    get_query_engine,
    get_post_store,
    get_image_storage,
)


def reset_container() -> None:
    """Limpia singletons (tests / recarga de settings)."""
    if get_password_service.cache_info().currsize:
        get_password_service().shutdown()
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()
