"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios por email (case-insensitive) / id / lote de ids.
  - Crear usuarios y traducir la violación de unicidad a EmailAlreadyExistsError.
  - Activar/desactivar y cambiar rol.
  - Listar con búsqueda ILIKE en name OR email, orden created_at DESC, id DESC.
  - Mapear filas crudas -> User y validar UserRole.

Collaborators:
  - psycopg_pool.ConnectionPool (inyectable; default pool global)
  - identity.users.User / UserRole
  - crosscutting.exceptions.DatabaseError

Constraints:
  - Repositorio puro: NO define reglas de negocio.
  - Retorna None cuando no existe el recurso.
  - SQL parametrizado siempre.
============================================================
"""

from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.errors import EmailAlreadyExistsError
from ....domain.value_objects import ListFilter
from ....identity.users import User, UserRole
from ._sql import fetchall, fetchone, like_pattern, resolve_pool, where_clause

_USER_COLUMNS = (
    "id, name, email, password_hash, role, is_active, created_at, updated_at"
)
_USER_ORDER_BY = "created_at DESC, id DESC"


def _row_to_user(row: tuple) -> User:
    try:
        role = UserRole(row[4])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[4]}") from exc

    return User(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        role=role,
        is_active=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


def _build_filters(list_filter: ListFilter) -> tuple[list[str], list[object]]:
    filters: list[str] = []
    params: list[object] = []

    term = list_filter.search_term
    if term:
        pattern = like_pattern(term)
        filters.append("(name ILIKE %s ESCAPE '\\' OR email ILIKE %s ESCAPE '\\')")
        params.extend([pattern, pattern])

    if list_filter.is_active is not None:
        filters.append("is_active = %s")
        params.append(list_filter.is_active)

    return filters, params


class PostgresUserRepository:
    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    # --- Lectura ---
    def get_user_by_email(self, email: str) -> Optional[User]:
        row = fetchone(
            self._pool,
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower(%s)",
            params=(email,),
            log_msg="PostgresUserRepository: get_user_by_email failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        row = fetchone(
            self._pool,
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: get_user_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def get_users_by_ids(self, user_ids: Sequence[UUID]) -> list[User]:
        if not user_ids:
            return []
        rows = fetchall(
            self._pool,
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = ANY(%s)",
            params=(list(user_ids),),
            log_msg="PostgresUserRepository: get_users_by_ids failed",
            log_extra={"count": len(user_ids)},
        )
        return [_row_to_user(r) for r in rows]

    def find_page(
        self, list_filter: ListFilter, *, offset: int, limit: int
    ) -> list[User]:
        """
        Guard rails:
        - limit <= 0 => []
        - offset < 0 => 0
        """
        if limit <= 0:
            return []
        offset = max(0, offset)

        filters, params = _build_filters(list_filter)
        rows = fetchall(
            self._pool,
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                {where_clause(filters)}
                ORDER BY {_USER_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            log_msg="PostgresUserRepository: find_page failed",
            log_extra={"limit": limit, "offset": offset},
        )
        return [_row_to_user(r) for r in rows]

    def count(self, list_filter: ListFilter) -> int:
        filters, params = _build_filters(list_filter)
        row = fetchone(
            self._pool,
            query=f"SELECT COUNT(*) FROM users {where_clause(filters)}",
            params=params,
            log_msg="PostgresUserRepository: count failed",
            log_extra={},
        )
        return int(row[0]) if row else 0

    # --- Escritura ---
    def create_user(self, user: User) -> User:
        query = f"""
            INSERT INTO users
                (id, name, email, password_hash, role, is_active, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, now()), COALESCE(%s, now()))
            RETURNING {_USER_COLUMNS}
        """
        params = (
            user.id,
            user.name,
            user.email,
            user.password_hash,
            user.role.value,
            user.is_active,
            user.created_at,
            user.updated_at,
        )
        try:
            with resolve_pool(self._pool).connection() as conn:
                row = conn.execute(query, params).fetchone()
        except pg_errors.UniqueViolation as exc:
            raise EmailAlreadyExistsError(user.email) from exc
        except Exception as exc:
            logger.exception(
                "PostgresUserRepository: create_user failed",
                extra={"user_id": str(user.id), "error": str(exc)},
            )
            raise DatabaseError(
                f"PostgresUserRepository: create_user failed: {exc}",
                original_error=exc,
            ) from exc

        if not row:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )
        return _row_to_user(row)

    def set_user_active(self, user_id: UUID, is_active: bool) -> Optional[User]:
        row = fetchone(
            self._pool,
            query=f"""
                UPDATE users
                SET is_active = %s, updated_at = now()
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=(is_active, user_id),
            log_msg="PostgresUserRepository: set_user_active failed",
            log_extra={"user_id": str(user_id), "is_active": is_active},
        )
        return _row_to_user(row) if row else None

    def set_user_role(self, user_id: UUID, role: str) -> Optional[User]:
        row = fetchone(
            self._pool,
            query=f"""
                UPDATE users
                SET role = %s, updated_at = now()
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=(UserRole(role).value, user_id),
            log_msg="PostgresUserRepository: set_user_role failed",
            log_extra={"user_id": str(user_id), "role": role},
        )
        return _row_to_user(row) if row else None
