"""Pool de conexiones PostgreSQL (psycopg_pool) y errores asociados."""

from .errors import (
    DatabaseConnectionError,
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import close_pool, get_pool, init_pool, ping_pool

__all__ = [
    "DatabaseConnectionError",
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "close_pool",
    "get_pool",
    "init_pool",
    "ping_pool",
]
