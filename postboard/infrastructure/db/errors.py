"""Errores del ciclo de vida del pool de Postgres."""


class DatabasePoolError(Exception):
    pass


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado dos veces en el mismo proceso."""


class PoolNotInitializedError(DatabasePoolError):
    """Uso de un repositorio Postgres antes de init_pool()."""


class DatabaseConnectionError(DatabasePoolError):
    """La DB no respondió al abrir el pool (el proceso no debe arrancar)."""
