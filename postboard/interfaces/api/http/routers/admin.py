"""
===============================================================================
TARJETA CRC - postboard/interfaces/api/http/routers/admin.py
===============================================================================

Name:
    Admin Router

Responsibilities:
    - Moderación: listar usuarios y posts (incluye inactivos).
    - Activar/desactivar posts y borrarlos sin chequeo de ownership.

Collaborators:
    - identity.dependencies.require_admin
    - application.query_engine.QueryEngine
    - application.post_store.PostStore

Policy:
    - Todas las rutas requieren role=admin (401 sin token, 403 sin rol).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from postboard.application.post_store import PostStore
from postboard.application.query_engine import Pagination, QueryEngine
from postboard.container import (
    get_image_storage,
    get_post_store,
    get_query_engine,
    get_user_repository,
)
from postboard.crosscutting.pagination import Page, to_page
from postboard.domain.repositories import UserRepository
from postboard.domain.services import FileStoragePort
from postboard.identity.dependencies import require_admin
from postboard.identity.users import User

from ..dependencies import get_pagination, get_search, render_post, render_post_page
from ..error_mapping import raise_domain_error
from ..schemas import MessageRes, PostEnvelopeRes, PostRes, UserRes, to_user_res

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=Page[UserRes])
def list_users(
    pagination: Pagination = Depends(get_pagination),
    search: str | None = Depends(get_search),
    _admin: User = Depends(require_admin()),
    engine: QueryEngine = Depends(get_query_engine),
):
    """Usuarios; search matchea nombre o email."""
    return to_page(engine.list_users(search, pagination), to_user_res)


@router.get("/posts", response_model=Page[PostRes])
def list_posts(
    pagination: Pagination = Depends(get_pagination),
    search: str | None = Depends(get_search),
    _admin: User = Depends(require_admin()),
    engine: QueryEngine = Depends(get_query_engine),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    list_page = engine.list_admin_posts(search, pagination)
    return render_post_page(list_page, users, storage)


@router.patch("/posts/{post_id}/toggle", response_model=PostEnvelopeRes)
def toggle_post(
    post_id: UUID,
    _admin: User = Depends(require_admin()),
    store: PostStore = Depends(get_post_store),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    result = store.admin_toggle_active(post_id)
    if result.error is not None:
        raise_domain_error(result.error, resource_id=post_id)

    state = "activated" if result.post.is_active else "deactivated"
    return PostEnvelopeRes(
        message=f"Post {state} successfully",
        post=render_post(result.post, users, storage),
    )


@router.delete("/posts/{post_id}", response_model=MessageRes)
def delete_post(
    post_id: UUID,
    _admin: User = Depends(require_admin()),
    store: PostStore = Depends(get_post_store),
):
    result = store.admin_delete(post_id)
    if result.error is not None:
        raise_domain_error(result.error, resource_id=post_id)
    return MessageRes(message="Post deleted successfully")
