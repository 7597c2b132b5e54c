"""
===============================================================================
TARJETA CRC - schemas/posts.py
===============================================================================

Módulo:
    Schemas HTTP para Posts y Usuarios (respuestas)

Responsabilidades:
    - Definir DTOs de response estables (nunca exponen password_hash).
    - Mappers entidad -> DTO, con resumen de autor resuelto en lote.

Colaboradores:
    - domain.entities.Post / AuthorStats
    - identity.users.User
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping
from uuid import UUID

from pydantic import BaseModel

from postboard.domain.entities import AuthorStats, Post
from postboard.identity.users import User, UserRole


class UserRes(BaseModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime | None = None


class AuthorRes(BaseModel):
    id: UUID
    name: str | None = None
    email: str | None = None


class PostRes(BaseModel):
    id: UUID
    title: str
    description: str
    image: str | None = None
    image_url: str | None = None
    author: AuthorRes
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostEnvelopeRes(BaseModel):
    message: str | None = None
    post: PostRes


class MessageRes(BaseModel):
    message: str


class UserStatsRes(BaseModel):
    total_posts: int
    published_posts: int
    draft_posts: int


def to_user_res(user: User) -> UserRes:
    return UserRes(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def to_post_res(
    post: Post,
    authors: Mapping[UUID, User] | None = None,
    *,
    image_url: str | None = None,
) -> PostRes:
    author = (authors or {}).get(post.author_id)
    return PostRes(
        id=post.id,
        title=post.title,
        description=post.description,
        image=post.image,
        image_url=image_url,
        author=AuthorRes(
            id=post.author_id,
            name=author.name if author else None,
            email=author.email if author else None,
        ),
        is_active=post.is_active,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def to_stats_res(stats: AuthorStats) -> UserStatsRes:
    return UserStatsRes(
        total_posts=stats.total,
        published_posts=stats.published,
        draft_posts=stats.draft,
    )
