"""
===============================================================================
TARJETA CRC - domain/validation.py
===============================================================================

Módulo:
    Validadores explícitos de entrada

Responsabilidades:
    - Validar registro, login y posts ANTES de cualquier mutación.
    - Devolver una lista estructurada de FieldError (vacía => válido).
    - Normalizar email (trim + lower).

Colaboradores:
    - identity.credentials: register/authenticate.
    - application.post_store: create/update.
    - scripts/create_admin.py.

Reglas:
    - name: 2..100 chars (trim)
    - email: forma local@dominio.tld, <= 254 chars
    - password: 6..128 chars
    - title: 3..200 chars (trim)
    - description: 10..10_000 chars (trim)
===============================================================================
"""

from __future__ import annotations

import re
from typing import Final

from .errors import FieldError

NAME_MIN: Final[int] = 2
NAME_MAX: Final[int] = 100
EMAIL_MAX: Final[int] = 254
PASSWORD_MIN: Final[int] = 6
PASSWORD_MAX: Final[int] = 128
TITLE_MIN: Final[int] = 3
TITLE_MAX: Final[int] = 200
DESCRIPTION_MIN: Final[int] = 10
DESCRIPTION_MAX: Final[int] = 10_000

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _check_length(
    field: str, value: str, *, min_len: int, max_len: int, label: str
) -> FieldError | None:
    if len(value) < min_len:
        return FieldError(field, f"{label} debe tener al menos {min_len} caracteres.")
    if len(value) > max_len:
        return FieldError(field, f"{label} debe tener como máximo {max_len} caracteres.")
    return None


def validate_email(email: str | None) -> list[FieldError]:
    normalized = normalize_email(email)
    if not normalized:
        return [FieldError("email", "El email es obligatorio.")]
    if len(normalized) > EMAIL_MAX or not _EMAIL_RE.match(normalized):
        return [FieldError("email", "Ingresá un email válido.")]
    return []


def validate_registration(
    name: str | None, email: str | None, password: str | None
) -> list[FieldError]:
    errors: list[FieldError] = []

    name_error = _check_length(
        "name", (name or "").strip(), min_len=NAME_MIN, max_len=NAME_MAX, label="El nombre"
    )
    if name_error:
        errors.append(name_error)

    errors.extend(validate_email(email))

    password_error = _check_length(
        "password",
        password or "",
        min_len=PASSWORD_MIN,
        max_len=PASSWORD_MAX,
        label="La contraseña",
    )
    if password_error:
        errors.append(password_error)

    return errors


def validate_login(email: str | None, password: str | None) -> list[FieldError]:
    errors = validate_email(email)
    if not password:
        errors.append(FieldError("password", "La contraseña es obligatoria."))
    return errors


def validate_post_fields(
    title: str | None, description: str | None, *, partial: bool = False
) -> list[FieldError]:
    """
    Valida título/descripción.

    partial=True (update): solo valida los campos provistos (no None).
    """
    errors: list[FieldError] = []

    if title is not None or not partial:
        title_error = _check_length(
            "title",
            (title or "").strip(),
            min_len=TITLE_MIN,
            max_len=TITLE_MAX,
            label="El título",
        )
        if title_error:
            errors.append(title_error)

    if description is not None or not partial:
        description_error = _check_length(
            "description",
            (description or "").strip(),
            min_len=DESCRIPTION_MIN,
            max_len=DESCRIPTION_MAX,
            label="La descripción",
        )
        if description_error:
            errors.append(description_error)

    return errors
