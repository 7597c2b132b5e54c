"""
===============================================================================
TARJETA CRC - identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario

Responsabilidades:
    - Definir el enum de roles (user | admin).
    - Definir el dataclass User que circula por CredentialStore,
      AccessControlGate y los repositorios.

Colaboradores:
    - identity/credentials.py: crea usuarios y verifica passwords.
    - identity/access_control.py: decide acceso según role/is_active.
    - infrastructure/repositories/*/user.py: mapea filas -> User.

Notas:
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
    - password_hash nunca se serializa hacia la API (ver schemas).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados (RBAC)."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario."""

    id: UUID
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def with_active(self, is_active: bool, *, updated_at: datetime) -> "User":
        return replace(self, is_active=is_active, updated_at=updated_at)
