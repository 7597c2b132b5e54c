"""
===============================================================================
CRC CARD - infrastructure/storage/s3_image_storage.py
===============================================================================

Clase:
  S3ImageStorage (Adapter)

Responsabilidades:
  - Guardar adjuntos de posts en un bucket S3 o MinIO.
  - Traducir ClientError y fallas de red de botocore a errores de storage.
  - Subir y borrar imágenes de posts; generar presigned URLs de lectura.
  - Construir keys estables: posts/<uuid><ext>.

Colaboradores:
  - domain.services.FileStoragePort (contrato que cumple)
  - infrastructure.storage.errors
  - boto3/botocore
===============================================================================
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

import boto3
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ...crosscutting.logger import logger
from .errors import (
    StorageConfigurationError,
    StorageError,
    StoragePermissionError,
    StorageUnavailableError,
)

_KEY_PREFIX = "posts"


@dataclass(frozen=True)
class S3Config:
    """endpoint_url permite MinIO; region puede omitirse en MinIO."""

    bucket: str
    access_key: str
    secret_key: str
    region: Optional[str] = None
    endpoint_url: Optional[str] = None


def build_image_key(filename: str | None, content_type: str | None) -> str:
    """posts/<uuid><ext>; la extensión sale del nombre o del content-type."""
    ext = ""
    if filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[1].lower()[:10]
    elif content_type:
        ext = mimetypes.guess_extension(content_type) or ""
    return f"{_KEY_PREFIX}/{uuid4().hex}{ext}"


class S3ImageStorage:
    def __init__(self, config: S3Config, *, client=None) -> None:
        self._bucket = (config.bucket or "").strip()

        if not self._bucket:
            raise StorageConfigurationError("S3 bucket es requerido.")
        if not (config.access_key or "").strip() or not (config.secret_key or "").strip():
            raise StorageConfigurationError(
                "Credenciales S3 requeridas (access_key/secret_key)."
            )

        # R: cliente inyectable para tests.
        self._client = client or boto3.client(
            "s3",
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region or None,
            endpoint_url=config.endpoint_url or None,
        )

    def upload_file(self, key: str, content: bytes, content_type: str | None) -> None:
        self._require_key(key)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=(content_type or "application/octet-stream").strip(),
            )
        except (ClientError, EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as exc:
            raise self._map_storage_error(exc, key=key, action="upload") from exc

    def delete_file(self, key: str) -> None:
        """Delete en S3 es idempotente."""
        self._require_key(key)
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as exc:
            raise self._map_storage_error(exc, key=key, action="delete") from exc

    def generate_presigned_url(self, key: str, *, expires_in_seconds: int = 3600) -> str:
        self._require_key(key)
        try:
            return str(
                self._client.generate_presigned_url(
                    ClientMethod="get_object",
                    Params={"Bucket": self._bucket, "Key": key},
                    ExpiresIn=max(1, int(expires_in_seconds)),
                )
            )
        except ClientError as exc:
            raise self._map_storage_error(exc, key=key, action="presign") from exc

    @staticmethod
    def _require_key(key: str) -> None:
        if not (key or "").strip():
            raise StorageError("key de storage es requerido.")

    @staticmethod
    def _map_storage_error(exc: Exception, *, key: str, action: str) -> StorageError:
        if isinstance(exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            logger.warning("Storage unavailable", extra={"action": action, "key": key})
            return StorageUnavailableError("Storage no disponible (timeout/conexión).")

        if isinstance(exc, ClientError):
            code = str((exc.response.get("Error") or {}).get("Code") or "")
            if code in {"AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"}:
                return StoragePermissionError()
            if code in {"SlowDown", "ServiceUnavailable", "503"}:
                return StorageUnavailableError()

        logger.error(
            "Storage error", extra={"action": action, "key": key, "error": str(exc)}
        )
        return StorageError(f"Falla de storage ({action}).")
