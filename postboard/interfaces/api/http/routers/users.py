"""
===============================================================================
TARJETA CRC - postboard/interfaces/api/http/routers/users.py
===============================================================================

Name:
    User Router ("mis" recursos)

Responsibilities:
    - Estadísticas de posts del usuario autenticado.
    - Listado paginado de sus posts (activos e inactivos).

Collaborators:
    - application.query_engine.QueryEngine (list_author_posts / author_stats)
    - identity.dependencies.require_user
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from postboard.application.query_engine import Pagination, QueryEngine
from postboard.container import get_image_storage, get_query_engine, get_user_repository
from postboard.crosscutting.pagination import Page
from postboard.domain.repositories import UserRepository
from postboard.domain.services import FileStoragePort
from postboard.identity.dependencies import require_user
from postboard.identity.users import User

from ..dependencies import get_pagination, get_search, render_post_page
from ..schemas import PostRes, UserStatsRes, to_stats_res

router = APIRouter()


@router.get("/user/stats", response_model=UserStatsRes, tags=["user"])
def user_stats(
    user: User = Depends(require_user()),
    engine: QueryEngine = Depends(get_query_engine),
):
    return to_stats_res(engine.author_stats(user.id))


@router.get("/user/my-posts", response_model=Page[PostRes], tags=["user"])
def my_posts(
    pagination: Pagination = Depends(get_pagination),
    search: str | None = Depends(get_search),
    user: User = Depends(require_user()),
    engine: QueryEngine = Depends(get_query_engine),
    users: UserRepository = Depends(get_user_repository),
    storage: FileStoragePort | None = Depends(get_image_storage),
):
    """Posts del autor, sin filtrar por activación."""
    list_page = engine.list_author_posts(user.id, search, pagination)
    return render_post_page(list_page, users, storage)
