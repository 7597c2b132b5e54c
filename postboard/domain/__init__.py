"""
===============================================================================
TARJETA CRC - domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import AuthorStats, Post
from .errors import DomainError, DomainErrorCode, EmailAlreadyExistsError, FieldError
from .post_policy import Requester, can_modify_post, can_toggle_post, has_role
from .repositories import ListSource, PostRepository, UserRepository
from .services import FileStoragePort
from .value_objects import ListFilter, PostPatch

__all__ = [
    "AuthorStats",
    "Post",
    "DomainError",
    "DomainErrorCode",
    "EmailAlreadyExistsError",
    "FieldError",
    "Requester",
    "can_modify_post",
    "can_toggle_post",
    "has_role",
    "ListSource",
    "PostRepository",
    "UserRepository",
    "FileStoragePort",
    "ListFilter",
    "PostPatch",
]
