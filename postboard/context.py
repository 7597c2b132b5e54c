"""
===============================================================================
TARJETA CRC - postboard/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar request_id, method, path y user_id del request en curso
    (ContextVars, seguros con async).
  - Exponerlos al logger sin pasarlos por parámetro.

Colaboradores:
  - crosscutting.middleware: request_id/method/path al entrar.
  - identity.dependencies: user_id una vez autenticado.
  - crosscutting.logger: get_context_dict() en cada línea.

Restricciones:
  - Valores str; "" significa "no disponible" y no se loguea.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Dict

_FIELDS: Dict[str, ContextVar[str]] = {
    name: ContextVar(f"postboard_{name}", default="")
    for name in ("request_id", "method", "path", "user_id")
}


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    _FIELDS["request_id"].set(request_id or "")
    _FIELDS["method"].set(method or "")
    _FIELDS["path"].set(path or "")


def set_user_context(user_id: str = "") -> None:
    _FIELDS["user_id"].set(user_id or "")


def get_context_dict() -> dict[str, str]:
    """Contexto actual sin claves vacías."""
    return {name: value for name, var in _FIELDS.items() if (value := var.get())}


def clear_context() -> None:
    for var in _FIELDS.values():
        var.set("")
