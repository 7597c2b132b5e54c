"""
===============================================================================
TARJETA CRC - router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (posts/user/admin).

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)

Notas:
  - Se monta sin prefijo: las rutas son /posts, /user/*, /admin/*.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.admin import router as admin_router
from .routers.posts import router as posts_router
from .routers.users import router as users_router


def build_router() -> APIRouter:
    """Construye el router raíz (invocable en tests sin efectos colaterales)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(posts_router)
    api_router.include_router(users_router)
    api_router.include_router(admin_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
