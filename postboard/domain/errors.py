"""
===============================================================================
TARJETA CRC - domain/errors.py
===============================================================================

Módulo:
    Taxonomía de errores de dominio (Result / Error Models)

Responsabilidades:
    - Definir un set acotado de códigos estables (DomainErrorCode).
    - Representar DomainError (code + message + field_errors) como contrato
      de error devuelto por CredentialStore, AccessControlGate y PostStore.
    - Definir la excepción de unicidad que levantan los repositorios.

Colaboradores:
    - domain.validation: produce FieldError.
    - interfaces/api/http/error_mapping.py: traduce a RFC7807.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DomainErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: inputs inválidos (con detalle por campo).
      - DUPLICATE_EMAIL: el email ya pertenece a otro usuario.
      - UNAUTHENTICATED: token/credenciales inválidas o usuario inactivo.
      - FORBIDDEN: rol insuficiente o no es dueño del recurso.
      - NOT_FOUND: recurso inexistente.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class DomainError:
    code: DomainErrorCode
    message: str
    field_errors: tuple[FieldError, ...] = field(default_factory=tuple)
    resource: str | None = None

    @classmethod
    def validation(cls, errors: list[FieldError]) -> "DomainError":
        return cls(
            DomainErrorCode.VALIDATION_ERROR,
            "Datos inválidos.",
            field_errors=tuple(errors),
        )

    @classmethod
    def not_found(cls, resource: str) -> "DomainError":
        return cls(
            DomainErrorCode.NOT_FOUND, f"{resource} no encontrado.", resource=resource
        )


class EmailAlreadyExistsError(Exception):
    """El storage rechazó el alta por email duplicado (unique index)."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email ya registrado.")
