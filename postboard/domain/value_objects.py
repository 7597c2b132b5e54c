"""
===============================================================================
TARJETA CRC - domain/value_objects.py
===============================================================================

Módulo:
    Objetos de valor para listados (filtro + patch)

Responsabilidades:
    - ListFilter: criterios combinables (search, is_active, author_id) que
      los repositorios traducen a SQL o a filtros en memoria.
    - PostPatch: campos opcionales de una actualización de post.

Colaboradores:
    - application.query_engine: arma ListFilter por vista.
    - domain.repositories: contratos find_page/count.
    - application.post_store: aplica PostPatch.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from uuid import UUID

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


@dataclass(frozen=True, slots=True)
class ListFilter:
    """
    Criterios de listado.

    - search: texto libre (None o vacío => sin filtro)
    - is_active: True/False restringe; None no restringe
    - author_id: restringe a un autor
    """

    search: str | None = None
    is_active: bool | None = None
    author_id: UUID | None = None

    @property
    def search_term(self) -> str | None:
        term = (self.search or "").strip()
        return term or None

    def search_tokens(self) -> list[str]:
        """Tokens en minúscula del término de búsqueda (match por token)."""
        return [t.lower() for t in _TOKEN_RE.findall(self.search_term or "")]


def tokenize(text: str) -> set[str]:
    return {t.lower() for t in _TOKEN_RE.findall(text or "")}


@dataclass(frozen=True, slots=True)
class PostPatch:
    """Campos opcionales de update (None => no se toca)."""

    title: str | None = None
    description: str | None = None
    image: str | None = None

    def is_empty(self) -> bool:
        return self.title is None and self.description is None and self.image is None
