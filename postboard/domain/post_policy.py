"""
===============================================================================
TARJETA CRC - domain/post_policy.py
===============================================================================

Módulo:
    Política de acceso a Posts (rol / ownership)

Responsabilidades:
    - Definir reglas puras de acceso (sin DB, sin FastAPI).
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - identity.users.UserRole
    - identity.access_control: envuelve estas reglas en AccessDecision.

Reglas:
    - Admin puede modificar/borrar cualquier post.
    - El autor puede modificar/borrar sus posts.
    - Solo admin puede activar/desactivar posts.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ..identity.users import User, UserRole


@dataclass(frozen=True, slots=True)
class Requester:
    """Actor que solicita la operación."""

    user_id: UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Requester":
        return cls(user_id=user.id, role=user.role)


def has_role(requester: Requester, required_role: UserRole) -> bool:
    return requester.role == required_role


def can_modify_post(requester: Requester, author_id: UUID) -> bool:
    """Admin o autor."""
    if requester.role == UserRole.ADMIN:
        return True
    return requester.user_id == author_id


def can_toggle_post(requester: Requester) -> bool:
    return requester.role == UserRole.ADMIN
