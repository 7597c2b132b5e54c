"""Adapters de infraestructura: Storage de imágenes."""

from .errors import (
    StorageConfigurationError,
    StorageError,
    StoragePermissionError,
    StorageUnavailableError,
)
from .s3_image_storage import S3Config, S3ImageStorage, build_image_key

__all__ = [
    "S3Config",
    "S3ImageStorage",
    "build_image_key",
    "StorageError",
    "StorageConfigurationError",
    "StoragePermissionError",
    "StorageUnavailableError",
]
