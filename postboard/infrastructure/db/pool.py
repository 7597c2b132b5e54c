"""
===============================================================================
CRC CARD - infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (singleton)

Responsabilidades:
  - Inicializar, exponer, verificar (ping) y cerrar el pool de conexiones.
  - Configurar conexiones: statement_timeout.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (lifespan: init fail-fast / close)
  - infrastructure/repositories/postgres/*

Principios:
  - Fail-fast (doble init, uso sin init, DB inaccesible al arrancar)
  - Encapsulación (pool global único)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool, PoolTimeout

from ...crosscutting.logger import logger
from .errors import (
    DatabaseConnectionError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _make_configure(statement_timeout_ms: int):
    def _configure_connection(conn) -> None:
        # R: guardrail contra queries colgadas.
        if statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
            conn.commit()

    return _configure_connection


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int = 0,
    open_timeout_seconds: float = 10.0,
) -> ConnectionPool:
    """
    Inicializa el pool (una vez por proceso).

    Espera a que haya min_size conexiones; si la DB no responde levanta
    DatabaseConnectionError (el proceso no debe arrancar).
    """
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        logger.info(
            "Inicializando pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )

        pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_make_configure(statement_timeout_ms),
            open=False,
        )
        try:
            pool.open(wait=True, timeout=open_timeout_seconds)
        except PoolTimeout as exc:
            pool.close()
            raise DatabaseConnectionError(
                "No se pudo conectar a la base de datos."
            ) from exc

        _pool = pool
        logger.info("Pool DB inicializado")
        return _pool


def get_pool() -> ConnectionPool:
    """Retorna el pool singleton."""
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def ping_pool() -> bool:
    """SELECT 1 contra la DB (readiness)."""
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1").fetchone()
        return True
    except Exception as exc:
        logger.warning("Ping DB falló", extra={"error": str(exc)})
        return False


def close_pool() -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Cerrando pool DB")
            try:
                _pool.close()
            finally:
                _pool = None
