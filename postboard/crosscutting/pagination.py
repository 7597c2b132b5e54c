"""
===============================================================================
MÓDULO: Utilidades de paginación (page/limit)
===============================================================================

Objetivo
--------
Response genérico Page[T] para todos los endpoints de listado:
- items de la página actual
- metadata {page, limit, total, pages}

Componente:
  Page + PaginationMeta + to_page()
===============================================================================
"""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
S = TypeVar("S")


class PaginationMeta(BaseModel):
    page: int = Field(description="Página actual (1-based)")
    limit: int = Field(description="Tamaño de página")
    total: int = Field(description="Total de items que cumplen el filtro")
    pages: int = Field(description="ceil(total / limit); 0 si no hay items")


class Page(BaseModel, Generic[T]):
    items: List[T] = Field(description="Items de la página actual")
    pagination: PaginationMeta = Field(description="Metadatos de paginación")


def to_page(list_page, mapper: Callable[[S], T]) -> Page[T]:
    """Convierte un ListPage de QueryEngine en el DTO HTTP."""
    return Page(
        items=[mapper(item) for item in list_page.items],
        pagination=PaginationMeta(
            page=list_page.page,
            limit=list_page.limit,
            total=list_page.total,
            pages=list_page.pages,
        ),
    )
