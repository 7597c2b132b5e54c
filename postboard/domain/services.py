"""
===============================================================================
TARJETA CRC - domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato de storage de imágenes de posts.
    - Mantener el dominio independiente de boto3.

Colaboradores:
    - infrastructure/storage/s3_image_storage.py: implementación S3/MinIO.
    - interfaces/api/http/routers/posts.py: sube la imagen y guarda la key.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol


class FileStoragePort(Protocol):
    """Contrato de storage de archivos (S3/MinIO/etc.)."""

    def upload_file(
        self, key: str, content: bytes, content_type: str | None
    ) -> None: ...

    def delete_file(self, key: str) -> None: ...

    def generate_presigned_url(
        self, key: str, *, expires_in_seconds: int = 3600
    ) -> str: ...
