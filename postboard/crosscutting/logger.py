"""
===============================================================================
MÓDULO: Logger de postboard-api (una línea JSON por evento)
===============================================================================

Componente:
  JsonLineFormatter + configure_logger() + scrub()

Responsabilidades:
  - Escribir cada evento como un objeto JSON en stdout (o texto plano si
    LOG_JSON=false).
  - Mezclar el contexto del request (request_id, method, path, user_id).
  - Enmascarar credenciales que lleguen en `extra` (password, hash, token,
    secret, authorization), a cualquier nivel de anidamiento.

Colaboradores:
  - postboard/context.py (ContextVars)
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from ..context import get_context_dict

LOGGER_NAME = "postboard-api"
MASK = "***"

# Atributos estándar de LogRecord: todo lo demás vino por `extra=`.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_SENSITIVE_MARKERS = ("password", "hash", "token", "secret", "authorization")
_MAX_TEXT = 4_000
_MAX_DEPTH = 4


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SENSITIVE_MARKERS)


def scrub(value: Any, *, key: str | None = None, depth: int = 0) -> Any:
    """Devuelve una copia serializable de `value` sin credenciales."""
    if key is not None and _is_sensitive(key):
        return MASK
    if depth >= _MAX_DEPTH:
        return "..."

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        if len(value) <= _MAX_TEXT:
            return value
        return f"{value[:_MAX_TEXT]}...[{len(value)} chars]"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Mapping):
        return {str(k): scrub(v, key=str(k), depth=depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [scrub(item, depth=depth + 1) for item in value]
    return str(value)


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "origin": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(get_context_dict())
        entry.update(
            {
                attr: scrub(value, key=attr)
                for attr, value in vars(record).items()
                if attr not in _STANDARD_ATTRS
            }
        )

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "trace": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Logger del proceso; idempotente ante re-imports."""
    level, as_json = "INFO", True
    try:
        from .config import get_settings

        settings = get_settings()
        level, as_json = settings.log_level, settings.log_json
    except ValidationError:
        # R: scripts sin DATABASE_URL arrancan con los defaults.
        pass

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JsonLineFormatter()
            if as_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)
    return log


logger = configure_logger()
