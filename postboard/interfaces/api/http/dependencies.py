"""
===============================================================================
TARJETA CRC - dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - Centralizar helpers que se repiten en routers:
      * parámetros de paginación (page/limit con tope)
      * normalización de campos de formulario vacíos
      * lectura de imágenes subidas con límite (anti OOM) y validación MIME
      * presentación de posts con autor resuelto en lote

Colaboradores:
  - crosscutting.config.get_settings
  - crosscutting.error_responses (RFC7807 factories)
  - application.query_engine (Pagination / ListPage)
  - domain.services.FileStoragePort
===============================================================================
"""

from __future__ import annotations

from typing import Iterable

from fastapi import Query, UploadFile

from postboard.application.query_engine import ListPage, Pagination
from postboard.crosscutting.config import get_settings
from postboard.crosscutting.error_responses import (
    payload_too_large,
    service_unavailable,
    validation_error,
)
from postboard.crosscutting.logger import logger
from postboard.crosscutting.pagination import Page, to_page
from postboard.domain.entities import Post
from postboard.domain.repositories import UserRepository
from postboard.domain.services import FileStoragePort
from postboard.infrastructure.storage import StorageError, build_image_key

from .schemas import PostRes, to_post_res

IMAGE_MIME_PREFIX = "image/"
IMAGE_URL_TTL_SECONDS = 3600


# =============================================================================
# Paginación
# =============================================================================


def get_pagination(
    page: int = Query(1, ge=1, description="Página (1-based)"),
    limit: int | None = Query(None, ge=1, description="Tamaño de página"),
) -> Pagination:
    """page/limit desde query string; limit se acota a max_page_limit."""
    settings = get_settings()
    effective = limit or settings.default_page_limit
    return Pagination(page=page, limit=min(effective, settings.max_page_limit))


def get_search(
    search: str | None = Query(None, max_length=200, description="Texto libre"),
) -> str | None:
    term = (search or "").strip()
    return term or None


# =============================================================================
# Formularios
# =============================================================================


def blank_to_none(value: str | None) -> str | None:
    """Campo multipart vacío => no provisto."""
    if value is None or not value.strip():
        return None
    return value


def has_upload(file: UploadFile | None) -> bool:
    return file is not None and bool(file.filename)


async def store_image_upload(
    file: UploadFile, storage: FileStoragePort | None
) -> str:
    """
    Valida y sube una imagen. Devuelve la key de storage.

    - content-type image/* (400 si no)
    - tamaño <= max_image_bytes (413 si no)
    - storage no configurado o caído => 503
    """
    settings = get_settings()
    content_type = (file.content_type or "").lower()
    if not content_type.startswith(IMAGE_MIME_PREFIX):
        raise validation_error(
            "Datos inválidos.",
            [{"field": "image", "message": "El archivo debe ser una imagen."}],
        )

    # R: leer a lo sumo max+1 bytes para detectar exceso sin cargar todo.
    content = await file.read(settings.max_image_bytes + 1)
    if len(content) > settings.max_image_bytes:
        raise payload_too_large(max_size=f"{settings.max_image_bytes} bytes")

    if storage is None:
        raise service_unavailable("Storage de imágenes")

    key = build_image_key(file.filename, content_type)
    try:
        storage.upload_file(key, content, content_type)
    except StorageError as exc:
        logger.error("Falla subiendo imagen", extra={"key": key, "error": str(exc)})
        raise service_unavailable("Storage de imágenes") from exc
    return key


# =============================================================================
# Presentación de posts
# =============================================================================


def image_url_for(storage: FileStoragePort | None, key: str | None) -> str | None:
    if storage is None or not key:
        return None
    try:
        return storage.generate_presigned_url(
            key, expires_in_seconds=IMAGE_URL_TTL_SECONDS
        )
    except StorageError as exc:
        logger.warning("No se pudo firmar URL", extra={"key": key, "error": str(exc)})
        return None


def _authors_for(posts: Iterable[Post], users: UserRepository):
    author_ids = list({post.author_id for post in posts})
    if not author_ids:
        return {}
    return {user.id: user for user in users.get_users_by_ids(author_ids)}


def render_post(
    post: Post, users: UserRepository, storage: FileStoragePort | None
) -> PostRes:
    return to_post_res(
        post,
        _authors_for([post], users),
        image_url=image_url_for(storage, post.image),
    )


def render_post_page(
    list_page: ListPage[Post], users: UserRepository, storage: FileStoragePort | None
) -> Page[PostRes]:
    # R: un solo lookup de autores por página.
    authors = _authors_for(list_page.items, users)
    return to_page(
        list_page,
        lambda post: to_post_res(
            post, authors, image_url=image_url_for(storage, post.image)
        ),
    )
