"""
============================================================
TARJETA CRC
============================================================
Class: postboard.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo, producción)
- Repositorios InMemory (tests / entornos volátiles; no persisten)
============================================================
"""

from .in_memory import InMemoryPostRepository, InMemoryUserRepository
from .postgres import PostgresPostRepository, PostgresUserRepository

__all__ = [
    "PostgresPostRepository",
    "PostgresUserRepository",
    "InMemoryPostRepository",
    "InMemoryUserRepository",
]
