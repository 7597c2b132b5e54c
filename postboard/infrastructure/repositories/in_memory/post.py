"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/post.py
============================================================
Class: InMemoryPostRepository

Responsibilities:
  - Almacenar posts en memoria (tests / local dev).
  - Replicar el contrato de Postgres:
      - búsqueda por tokens (todos los tokens del término deben aparecer
        como palabra en title + description, sin distinguir mayúsculas)
      - filtros is_active / author_id
      - orden created_at DESC, id DESC
      - toggle atómico bajo lock

Constraints:
  - Thread-safe: acceso protegido por Lock.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from ....domain.entities import Post
from ....domain.value_objects import ListFilter, tokenize

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryPostRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._posts: Dict[UUID, Post] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _sorted(items: Iterable[Post]) -> List[Post]:
        return sorted(items, key=lambda p: (p.created_at or _EPOCH, p.id), reverse=True)

    @staticmethod
    def _matches(post: Post, list_filter: ListFilter) -> bool:
        if list_filter.search_term is not None:
            tokens = list_filter.search_tokens()
            # R: plainto_tsquery sin lexemas no matchea nada ("!!!").
            if not tokens:
                return False
            haystack = tokenize(f"{post.title} {post.description}")
            if not all(token in haystack for token in tokens):
                return False
        if list_filter.is_active is not None and post.is_active != list_filter.is_active:
            return False
        if list_filter.author_id is not None and post.author_id != list_filter.author_id:
            return False
        return True

    def get_post(self, post_id: UUID) -> Optional[Post]:
        with self._lock:
            return self._posts.get(post_id)

    def create_post(self, post: Post) -> Post:
        now = self._now()
        stored = replace(
            post,
            created_at=post.created_at or now,
            updated_at=post.updated_at or now,
        )
        with self._lock:
            self._posts[stored.id] = stored
        return stored

    def update_post(
        self,
        post_id: UUID,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[Post]:
        changes: dict[str, object] = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if image is not None:
            changes["image"] = image

        with self._lock:
            current = self._posts.get(post_id)
            if current is None:
                return None
            if not changes:
                return current
            updated = replace(current, **changes, updated_at=self._now())
            self._posts[post_id] = updated
            return updated

    def toggle_post_active(self, post_id: UUID) -> Optional[Post]:
        with self._lock:
            current = self._posts.get(post_id)
            if current is None:
                return None
            updated = replace(
                current, is_active=not current.is_active, updated_at=self._now()
            )
            self._posts[post_id] = updated
            return updated

    def delete_post(self, post_id: UUID) -> bool:
        with self._lock:
            return self._posts.pop(post_id, None) is not None

    def find_page(
        self, list_filter: ListFilter, *, offset: int, limit: int
    ) -> List[Post]:
        if limit <= 0:
            return []
        offset = max(0, offset)
        with self._lock:
            values = list(self._posts.values())
        matching = self._sorted(p for p in values if self._matches(p, list_filter))
        return matching[offset : offset + limit]

    def count(self, list_filter: ListFilter) -> int:
        with self._lock:
            return sum(1 for p in self._posts.values() if self._matches(p, list_filter))
