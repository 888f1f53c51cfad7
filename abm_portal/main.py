"""FastAPI application entrypoint and router wiring for the ABM portal service."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from abm_portal.api.auth import router as auth_router
from abm_portal.api.budgets import router as budgets_router
from abm_portal.api.reportees import router as reportees_router
from abm_portal.api.requests import router as requests_router
from abm_portal.core.config import settings
from abm_portal.core.error_handling import install_error_handling
from abm_portal.core.logging import configure_logging, get_logger
from abm_portal.db.session import init_db
from abm_portal.schemas.health import HealthStatusResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)
OPENAPI_TAGS = [
    {
        "name": "auth",
        "description": "Reviewer username existence check used at login.",
    },
    {
        "name": "health",
        "description": "Service liveness check used by infrastructure monitors.",
    },
    {
        "name": "requests",
        "description": "Discount request listing and review decisions (single or batch).",
    },
    {
        "name": "reportees",
        "description": "Sales executives reporting to a reviewer, used as a list filter.",
    },
    {
        "name": "budget",
        "description": "Reviewer allocated/consumed budget for a given week.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize application resources before serving requests."""
    logger.info(
        "app.lifecycle.starting environment=%s db_create_tables=%s",
        settings.environment,
        settings.db_create_tables,
    )
    await init_db()
    logger.info("app.lifecycle.started")
    try:
        yield
    finally:
        logger.info("app.lifecycle.stopped")


def create_app() -> FastAPI:
    """Build the service app with CORS, error handling, and all routers mounted."""
    fastapi_app = FastAPI(
        title="ABM Approval Portal API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    origins = settings.cors_origin_list
    if origins:
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.info("app.cors.enabled origins_count=%s", len(origins))
    else:
        logger.info("app.cors.disabled")

    install_error_handling(fastapi_app)

    @fastapi_app.get(
        "/health",
        tags=["health"],
        response_model=HealthStatusResponse,
        summary="Health Check",
        description="Lightweight liveness endpoint.",
        responses={
            status.HTTP_200_OK: {
                "description": "Service is alive.",
                "content": {"application/json": {"example": {"ok": True}}},
            }
        },
    )
    def health() -> HealthStatusResponse:
        """Lightweight liveness endpoint."""
        return HealthStatusResponse(ok=True)

    portal = APIRouter(prefix=settings.api_prefix.rstrip("/"))
    portal.include_router(auth_router)
    portal.include_router(reportees_router)
    portal.include_router(requests_router)
    portal.include_router(budgets_router)
    fastapi_app.include_router(portal)

    logger.debug("app.routes.registered count=%s", len(fastapi_app.routes))
    return fastapi_app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
