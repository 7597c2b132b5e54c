"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Replicar el contrato de Postgres: email único case-insensitive,
    búsqueda substring en name OR email, orden created_at DESC, id DESC.

Constraints:
  - Thread-safe: acceso protegido por Lock.
  - Entidades frozen: no hay aliasing de objetos mutables.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from ....domain.errors import EmailAlreadyExistsError
from ....domain.value_objects import ListFilter
from ....identity.users import User, UserRole

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _sorted(items: Iterable[User]) -> List[User]:
        return sorted(items, key=lambda u: (u.created_at or _EPOCH, u.id), reverse=True)

    @staticmethod
    def _matches(user: User, list_filter: ListFilter) -> bool:
        term = list_filter.search_term
        if term:
            needle = term.lower()
            if needle not in user.name.lower() and needle not in user.email.lower():
                return False
        if list_filter.is_active is not None and user.is_active != list_filter.is_active:
            return False
        return True

    # --- Lectura ---
    def get_user_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").lower()
        with self._lock:
            for user in self._users.values():
                if user.email.lower() == wanted:
                    return user
        return None

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_users_by_ids(self, user_ids: Sequence[UUID]) -> List[User]:
        wanted = set(user_ids)
        with self._lock:
            return [u for uid, u in self._users.items() if uid in wanted]

    def find_page(
        self, list_filter: ListFilter, *, offset: int, limit: int
    ) -> List[User]:
        if limit <= 0:
            return []
        offset = max(0, offset)
        with self._lock:
            values = list(self._users.values())
        matching = self._sorted(u for u in values if self._matches(u, list_filter))
        return matching[offset : offset + limit]

    def count(self, list_filter: ListFilter) -> int:
        with self._lock:
            return sum(1 for u in self._users.values() if self._matches(u, list_filter))

    # --- Escritura ---
    def create_user(self, user: User) -> User:
        with self._lock:
            wanted = user.email.lower()
            if any(u.email.lower() == wanted for u in self._users.values()):
                raise EmailAlreadyExistsError(user.email)
            now = self._now()
            stored = replace(
                user,
                created_at=user.created_at or now,
                updated_at=user.updated_at or now,
            )
            self._users[stored.id] = stored
            return stored

    def set_user_active(self, user_id: UUID, is_active: bool) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = current.with_active(is_active, updated_at=self._now())
            self._users[user_id] = updated
            return updated

    def set_user_role(self, user_id: UUID, role: str) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = replace(current, role=UserRole(role), updated_at=self._now())
            self._users[user_id] = updated
            return updated
