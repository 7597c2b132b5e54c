"""
===============================================================================
TARJETA CRC - postboard/interfaces/api/http/routers/posts.py
===============================================================================

Name:
    Posts Router

Responsibilities:
    - Listado público paginado (solo activos) con búsqueda.
    - CRUD de posts para usuarios autenticados (multipart con imagen opcional).
    - Validaciones de borde (MIME, tamaño) antes de tocar storage.
    - Mapeo de DomainError -> RFC7807.

Collaborators:
    - application.query_engine.QueryEngine
    - application.post_store.PostStore
    - identity.dependencies.require_user
    - http.dependencies (paginación, uploads, presentación)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile

from postboard.application.post_store import PostStore
from postboard.application.query_engine import Pagination, QueryEngine
from postboard.container import (
    get_image_storage,
    get_post_store,
    get_query_engine,
    get_user_repository,
)
from postboard.crosscutting.pagination import Page
from postboard.domain.errors import DomainError
from postboard.domain.post_policy import Requester
from postboard.domain.repositories import UserRepository
from postboard.domain.services import FileStoragePort
from postboard.domain.validation import validate_post_fields
from postboard.domain.value_objects import PostPatch
from postboard.identity.dependencies import require_user
from postboard.identity.users import User

from ..dependencies import (
    blank_to_none,
    get_pagination,
    get_search,
    has_upload,
    render_post,
    render_post_page,
    store_image_upload,
)
from ..error_mapping import raise_domain_error
from ..schemas import MessageRes, PostEnvelopeRes, PostRes

router = APIRouter()


@router.get("/posts", response_model=Page[PostRes], tags=["posts"])
def list_posts(
    pagination: Pagination = Depends(get_pagination),
    search: str | None = Depends(get_search),
    engine: QueryEngine = Depends(get_query_engine),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    """Posts públicos (activos), más nuevos primero."""
    list_page = engine.list_public_posts(search, pagination)
    return render_post_page(list_page, users, storage)


@router.get("/posts/{post_id}", response_model=PostRes, tags=["posts"])
def get_post(
    post_id: UUID,
    _user: User = Depends(require_user()),
    store: PostStore = Depends(get_post_store),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    result = store.get(post_id)
    if result.error is not None:
        raise_domain_error(result.error, resource_id=post_id)
    return render_post(result.post, users, storage)


@router.post("/posts", response_model=PostEnvelopeRes, status_code=201, tags=["posts"])
async def create_post(
    title: str | None = Form(None),
    description: str | None = Form(None),
    image: UploadFile | None = File(None),
    user: User = Depends(require_user()),
    store: PostStore = Depends(get_post_store),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    # R: validar antes de subir para no dejar imágenes huérfanas.
    errors = validate_post_fields(title, description)
    if errors:
        raise_domain_error(DomainError.validation(errors))

    image_key = None
    if has_upload(image):
        image_key = await store_image_upload(image, storage)

    result = store.create(user.id, title, description, image_key)
    if result.error is not None:
        raise_domain_error(result.error)

    return PostEnvelopeRes(
        message="Post created successfully",
        post=render_post(result.post, users, storage),
    )


@router.put("/posts/{post_id}", response_model=PostEnvelopeRes, tags=["posts"])
async def update_post(
    post_id: UUID,
    title: str | None = Form(None),
    description: str | None = Form(None),
    image: UploadFile | None = File(None),
    user: User = Depends(require_user()),
    store: PostStore = Depends(get_post_store),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    requester = Requester.from_user(user)
    title = blank_to_none(title)
    description = blank_to_none(description)

    image_key = None
    if has_upload(image):
        checked = store.authorize_modify(post_id, requester)
        if checked.error is not None:
            raise_domain_error(checked.error, resource_id=post_id)
        errors = validate_post_fields(title, description, partial=True)
        if errors:
            raise_domain_error(DomainError.validation(errors))
        image_key = await store_image_upload(image, storage)

    patch = PostPatch(title=title, description=description, image=image_key)
    result = store.update(post_id, requester, patch)
    if result.error is not None:
        raise_domain_error(result.error, resource_id=post_id)

    return PostEnvelopeRes(
        message="Post updated successfully",
        post=render_post(result.post, users, storage),
    )


@router.delete("/posts/{post_id}", response_model=MessageRes, tags=["posts"])
def delete_post(
    post_id: UUID,
    user: User = Depends(require_user()),
    store: PostStore = Depends(get_post_store),
):
    result = store.delete(post_id, Requester.from_user(user))
    if result.error is not None:
        raise_domain_error(result.error, resource_id=post_id)
    return MessageRes(message="Post deleted successfully")
