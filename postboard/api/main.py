"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, security headers, request context, CORS)
  - Mount auth routes and the posts/user/admin router at the root
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - RequestContextMiddleware: Request ID, logging context and metrics
  - interfaces.api.http.router: posts/user/admin endpoints
  - api.auth_routes: register/login/logout/me
  - infrastructure.db.pool: Postgres pool lifecycle

Notes:
  - Middleware order matters: CORS -> RequestContext -> SecurityHeaders -> BodyLimit -> routes
  - In test env (APP_ENV=test) repositories are in-memory and no pool is opened
  - If the pool cannot be opened at startup the lifespan raises (process exits)
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import reset_container, uses_postgres
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..identity.dependencies import require_metrics_access
from ..infrastructure.db.pool import close_pool, init_pool, ping_pool
from ..interfaces.api.http.router import router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

APP_TITLE = "Postboard API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Opens the DB pool (fail-fast) when needed."""
    settings = get_settings()
    postgres = uses_postgres()

    if postgres:
        # R: must happen before any repository usage
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    try:
        logger.info(
            "Postboard API starting up",
            extra={
                "app_env": settings.app_env,
                "storage": "postgres" if postgres else "in-memory",
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "image_storage": settings.storage_configured(),
            },
        )
        yield
    finally:
        reset_container()
        if postgres:
            close_pool()
        logger.info("Postboard API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Registro y login (JWT Bearer)"},
            {"name": "posts", "description": "Posts públicos y CRUD del autor"},
            {"name": "user", "description": "Estadísticas y posts propios"},
            {"name": "admin", "description": "Moderación (requiere role=admin)"},
        ],
    )

    # R: Middleware order (bottom = first to execute)
    app.add_middleware(BodyLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        SecurityHeadersMiddleware, is_production=settings.is_production()
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )

    app.include_router(auth_router)
    app.include_router(router)

    register_exception_handlers(app)

    @app.get("/health", tags=["ops"])
    def health(request: Request):
        """
        Readiness probe.

        Returns:
            ok: True if the store is reachable
            db: "connected", "disconnected" or "in-memory"
            request_id: correlation ID for this request
        """
        if uses_postgres():
            db_status = "connected" if ping_pool() else "disconnected"
        else:
            db_status = "in-memory"

        return {
            "ok": db_status != "disconnected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics", tags=["ops"])
    def metrics(_auth=Depends(require_metrics_access())):
        """Prometheus text format metrics."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()


def run() -> None:
    """Console entrypoint: `postboard-api`."""
    settings = get_settings()
    uvicorn.run(
        "postboard.api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
