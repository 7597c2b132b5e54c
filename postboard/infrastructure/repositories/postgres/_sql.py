"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/_sql.py
============================================================
Responsibilities:
  - Ejecutar SQL parametrizado con manejo consistente de errores.
  - Centralizar logging + raise DatabaseError.
  - Escapar patrones ILIKE.

Collaborators:
  - psycopg_pool.ConnectionPool
  - crosscutting.exceptions.DatabaseError
============================================================
"""

from __future__ import annotations

from typing import Iterable

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger


def resolve_pool(pool: ConnectionPool | None) -> ConnectionPool:
    if pool is not None:
        return pool
    from ...db.pool import get_pool

    return get_pool()


def fetchone(
    pool: ConnectionPool | None,
    *,
    query: str,
    params: Iterable[object],
    log_msg: str,
    log_extra: dict[str, object],
) -> tuple | None:
    try:
        with resolve_pool(pool).connection() as conn:
            return conn.execute(query, tuple(params)).fetchone()
    except Exception as exc:
        logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
        raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc


def fetchall(
    pool: ConnectionPool | None,
    *,
    query: str,
    params: Iterable[object] = (),
    log_msg: str,
    log_extra: dict[str, object],
) -> list[tuple]:
    try:
        with resolve_pool(pool).connection() as conn:
            return conn.execute(query, tuple(params)).fetchall()
    except Exception as exc:
        logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
        raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc


def like_pattern(term: str) -> str:
    """%term% con \\, % y _ escapados (ILIKE ... ESCAPE '\\')."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def where_clause(filters: list[str]) -> str:
    return f"WHERE {' AND '.join(filters)}" if filters else ""
