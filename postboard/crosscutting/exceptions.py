"""
===============================================================================
MÓDULO: Errores internos (no de dominio)
===============================================================================

Responsabilidades:
  - Representar fallas de infraestructura que terminan en HTTP 500.
  - Asignar un error_id por ocurrencia para cruzar respuesta y logs.

Colaboradores:
  - api/exception_handlers.py (500 problem+json con error_id)
  - infrastructure/repositories/postgres (DatabaseError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class PostboardError(Exception):
    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex
        self.original_error = original_error


class DatabaseError(PostboardError):
    """Query, timeout o conexión fallida contra Postgres."""
