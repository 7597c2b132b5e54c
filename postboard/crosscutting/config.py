"""
===============================================================================
TARJETA CRC - crosscutting/config.py (Settings de postboard-api)
===============================================================================

Responsabilidades:
  - Leer la configuración del proceso desde variables de entorno (y .env)
    con pydantic-settings, tipada y validada al arrancar.
  - Negarse a arrancar en producción con un JWT_SECRET débil o de ejemplo.
  - Exponer helpers chicos (entorno, orígenes CORS, storage habilitado).

Colaboradores:
  - api/main.py: CORS, body limit, host/port.
  - container.py: TokenService, PasswordService, pool y storage.
  - interfaces/api/http: límites de paginación e imágenes.

Restricciones:
  - Un Settings por proceso (lru_cache); los tests llaman cache_clear().
===============================================================================
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_WEAK_SECRETS = frozenset({"dev-secret", "changeme", "change-me", "password", "secret"})
_MIN_PROD_SECRET_LEN = 32
_TEST_ENVS = frozenset({"test", "testing", "ci"})


class Settings(BaseSettings):
    """Config del proceso; cada campo se lee de su variable en mayúsculas."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str

    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    log_json: bool = True

    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # tokens y passwords
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 7 * 24 * 60
    password_hash_workers: int = 4

    max_body_bytes: int = 10 * 1024 * 1024
    metrics_require_auth: bool = False

    # listados: desde all_records_limit se incluyen posts inactivos
    default_page_limit: int = 10
    max_page_limit: int = 1000
    all_records_limit: int = 1000

    # imágenes de posts (S3/MinIO, opcional)
    s3_endpoint_url: str = ""
    s3_bucket: str = ""
    s3_access_key: str = ""
    s3_secret_key: str = ""
    s3_region: str = ""
    max_image_bytes: int = 5 * 1024 * 1024

    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30_000

    @field_validator("database_url")
    @classmethod
    def strip_database_url(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("DATABASE_URL no puede estar vacío")
        return value

    @field_validator(
        "jwt_access_ttl_minutes",
        "password_hash_workers",
        "default_page_limit",
        "max_page_limit",
        "all_records_limit",
        "max_image_bytes",
        "max_body_bytes",
    )
    @classmethod
    def must_be_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("debe ser mayor que 0")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()

    @model_validator(mode="after")
    def check_consistency(self) -> "Settings":
        if self.default_page_limit > self.max_page_limit:
            raise ValueError("DEFAULT_PAGE_LIMIT no puede superar MAX_PAGE_LIMIT")
        if self.cors_allow_credentials and "*" in self.get_allowed_origins_list():
            raise ValueError(
                "ALLOWED_ORIGINS no admite '*' con CORS_ALLOW_CREDENTIALS=true"
            )
        if self.is_production():
            secret = (self.jwt_secret or "").strip()
            if secret in _WEAK_SECRETS or len(secret) < _MIN_PROD_SECRET_LEN:
                raise ValueError(
                    f"JWT_SECRET en producción debe ser propio y de al menos "
                    f"{_MIN_PROD_SECRET_LEN} caracteres"
                )
        return self

    def environment(self) -> str:
        return self.app_env.strip().lower()

    def is_production(self) -> bool:
        return self.environment() == "production"

    def is_test(self) -> bool:
        return self.environment() in _TEST_ENVS

    def get_allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def storage_configured(self) -> bool:
        return all((self.s3_bucket, self.s3_access_key, self.s3_secret_key))


@lru_cache
def get_settings() -> Settings:
    return Settings()
