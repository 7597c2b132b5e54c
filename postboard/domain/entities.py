"""
===============================================================================
TARJETA CRC - domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Post)

Responsabilidades:
    - Definir la estructura central del contenido publicado.
    - Mantener el invariante "author_id se fija una sola vez" (frozen).

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application.post_store: aplica reglas de mutación.
    - interfaces/api: serializan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID


def utcnow() -> datetime:
    """Fecha/hora UTC."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Post:
    """
    Publicación de un usuario.

    image guarda la storage key (no bytes); None si no hay imagen.
    """

    id: UUID
    title: str
    description: str
    author_id: UUID
    image: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AuthorStats:
    """Conteos por autor para /user/stats."""

    total: int
    published: int
    draft: int
