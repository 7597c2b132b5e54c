"""
===============================================================================
QUERY ENGINE (Paginated / Searchable Listings)
===============================================================================

Name:
    QueryEngine

Business Goal:
    Un único contrato de listado para usuarios, posts públicos, posts de
    admin y "mis posts":
      - orden created_at DESC (desempate id DESC), invariante en todos los listados
      - skip = (page - 1) * limit, a lo sumo `limit` items
      - total ignora la paginación; pages = ceil(total / limit)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    QueryEngine

Responsibilities:
    - Validar Pagination (page >= 1, limit >= 1).
    - Componer ListFilter por vista (search / is_active / author_id).
    - Delegar find_page + count al ListSource y armar ListPage.
    - Modo "todos los registros" para dashboards: limit >= all_records_limit
      quita el filtro de activos en el listado público.

Collaborators:
    - domain.repositories.ListSource (UserRepository / PostRepository)
    - domain.value_objects.ListFilter
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, TypeVar
from uuid import UUID

from ..domain.entities import AuthorStats, Post
from ..domain.repositories import ListSource, PostRepository, UserRepository
from ..domain.value_objects import ListFilter
from ..identity.users import User

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_ALL_RECORDS_LIMIT = 1000


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ListPage(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.limit)


class QueryEngine:
    def __init__(
        self,
        users: UserRepository,
        posts: PostRepository,
        *,
        all_records_limit: int = DEFAULT_ALL_RECORDS_LIMIT,
    ):
        self._users = users
        self._posts = posts
        self._all_records_limit = all_records_limit

    @staticmethod
    def build_list(
        source: ListSource[T], list_filter: ListFilter, pagination: Pagination
    ) -> ListPage[T]:
        total = source.count(list_filter)
        if total == 0 or pagination.offset >= total:
            items: List[T] = []
        else:
            items = list(
                source.find_page(
                    list_filter, offset=pagination.offset, limit=pagination.limit
                )
            )[: pagination.limit]
        return ListPage(
            items=items, total=total, page=pagination.page, limit=pagination.limit
        )

    # ------------------------------------------------------------------
    # Vistas
    # ------------------------------------------------------------------
    def list_users(self, search: str | None, pagination: Pagination) -> ListPage[User]:
        return self.build_list(self._users, ListFilter(search=search), pagination)

    def list_public_posts(
        self, search: str | None, pagination: Pagination
    ) -> ListPage[Post]:
        all_records = pagination.limit >= self._all_records_limit
        list_filter = ListFilter(search=search, is_active=None if all_records else True)
        return self.build_list(self._posts, list_filter, pagination)

    def list_admin_posts(
        self, search: str | None, pagination: Pagination
    ) -> ListPage[Post]:
        return self.build_list(self._posts, ListFilter(search=search), pagination)

    def list_author_posts(
        self, author_id: UUID, search: str | None, pagination: Pagination
    ) -> ListPage[Post]:
        list_filter = ListFilter(search=search, author_id=author_id)
        return self.build_list(self._posts, list_filter, pagination)

    def author_stats(self, author_id: UUID) -> AuthorStats:
        published = self._posts.count(ListFilter(author_id=author_id, is_active=True))
        draft = self._posts.count(ListFilter(author_id=author_id, is_active=False))
        return AuthorStats(total=published + draft, published=published, draft=draft)
