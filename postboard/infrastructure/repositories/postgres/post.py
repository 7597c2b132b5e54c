"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/post.py
============================================================
Class: PostgresPostRepository

Responsibilities:
  - CRUD de posts con SQL parametrizado.
  - Update parcial dinámico (solo campos provistos) sin tocar author_id.
  - Toggle atómico de is_active (UPDATE ... SET is_active = NOT is_active).
  - Listado con full-text search sobre la columna generada `tsv`
    (plainto_tsquery 'simple', índice GIN), filtros is_active / author_id,
    orden created_at DESC, id DESC.

Collaborators:
  - psycopg_pool.ConnectionPool
  - domain.entities.Post
  - crosscutting.exceptions.DatabaseError

Constraints:
  - Sin locking optimista: updates concurrentes => last-write-wins.
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import Post
from ....domain.value_objects import ListFilter
from ._sql import fetchall, fetchone, where_clause

_POST_COLUMNS = (
    "id, title, description, image, author_id, is_active, created_at, updated_at"
)
_POST_ORDER_BY = "created_at DESC, id DESC"
_FTS_CONFIG = "simple"


def _row_to_post(row: tuple) -> Post:
    return Post(
        id=row[0],
        title=row[1],
        description=row[2],
        image=row[3],
        author_id=row[4],
        is_active=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


def _build_filters(list_filter: ListFilter) -> tuple[list[str], list[object]]:
    filters: list[str] = []
    params: list[object] = []

    term = list_filter.search_term
    if term:
        filters.append(f"tsv @@ plainto_tsquery('{_FTS_CONFIG}', %s)")
        params.append(term)

    if list_filter.is_active is not None:
        filters.append("is_active = %s")
        params.append(list_filter.is_active)

    if list_filter.author_id is not None:
        filters.append("author_id = %s")
        params.append(list_filter.author_id)

    return filters, params


class PostgresPostRepository:
    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    def get_post(self, post_id: UUID) -> Optional[Post]:
        row = fetchone(
            self._pool,
            query=f"SELECT {_POST_COLUMNS} FROM posts WHERE id = %s",
            params=(post_id,),
            log_msg="PostgresPostRepository: get_post failed",
            log_extra={"post_id": str(post_id)},
        )
        return _row_to_post(row) if row else None

    def create_post(self, post: Post) -> Post:
        row = fetchone(
            self._pool,
            query=f"""
                INSERT INTO posts
                    (id, title, description, image, author_id, is_active,
                     created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, now()), COALESCE(%s, now()))
                RETURNING {_POST_COLUMNS}
            """,
            params=(
                post.id,
                post.title,
                post.description,
                post.image,
                post.author_id,
                post.is_active,
                post.created_at,
                post.updated_at,
            ),
            log_msg="PostgresPostRepository: create_post failed",
            log_extra={"post_id": str(post.id)},
        )
        if not row:
            raise DatabaseError(
                "PostgresPostRepository: create_post failed (no row returned)"
            )
        return _row_to_post(row)

    def update_post(
        self,
        post_id: UUID,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[Post]:
        updates: list[str] = []
        params: list[object] = []

        if title is not None:
            updates.append("title = %s")
            params.append(title)
        if description is not None:
            updates.append("description = %s")
            params.append(description)
        if image is not None:
            updates.append("image = %s")
            params.append(image)

        if not updates:
            return self.get_post(post_id)

        updates.append("updated_at = now()")
        params.append(post_id)

        # updates es controlado por código (no input usuario).
        row = fetchone(
            self._pool,
            query=f"""
                UPDATE posts
                SET {", ".join(updates)}
                WHERE id = %s
                RETURNING {_POST_COLUMNS}
            """,
            params=params,
            log_msg="PostgresPostRepository: update_post failed",
            log_extra={"post_id": str(post_id)},
        )
        return _row_to_post(row) if row else None

    def toggle_post_active(self, post_id: UUID) -> Optional[Post]:
        row = fetchone(
            self._pool,
            query=f"""
                UPDATE posts
                SET is_active = NOT is_active, updated_at = now()
                WHERE id = %s
                RETURNING {_POST_COLUMNS}
            """,
            params=(post_id,),
            log_msg="PostgresPostRepository: toggle_post_active failed",
            log_extra={"post_id": str(post_id)},
        )
        return _row_to_post(row) if row else None

    def delete_post(self, post_id: UUID) -> bool:
        row = fetchone(
            self._pool,
            query="DELETE FROM posts WHERE id = %s RETURNING id",
            params=(post_id,),
            log_msg="PostgresPostRepository: delete_post failed",
            log_extra={"post_id": str(post_id)},
        )
        return row is not None

    def find_page(
        self, list_filter: ListFilter, *, offset: int, limit: int
    ) -> list[Post]:
        if limit <= 0:
            return []
        offset = max(0, offset)

        filters, params = _build_filters(list_filter)
        rows = fetchall(
            self._pool,
            query=f"""
                SELECT {_POST_COLUMNS}
                FROM posts
                {where_clause(filters)}
                ORDER BY {_POST_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            log_msg="PostgresPostRepository: find_page failed",
            log_extra={"limit": limit, "offset": offset},
        )
        return [_row_to_post(r) for r in rows]

    def count(self, list_filter: ListFilter) -> int:
        filters, params = _build_filters(list_filter)
        row = fetchone(
            self._pool,
            query=f"SELECT COUNT(*) FROM posts {where_clause(filters)}",
            params=params,
            log_msg="PostgresPostRepository: count failed",
            log_extra={},
        )
        return int(row[0]) if row else 0
