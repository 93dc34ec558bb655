# qrtix/app/main.py
"""
FastAPI application entry point.

Usage:
    uvicorn qrtix.app.main:app --host 0.0.0.0 --port 8080

    # Or run directly:
    python -m qrtix.app.main
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from qrtix.app.api.errors import register_exception_handlers
from qrtix.app.api.router import api_router
from qrtix.app.core.config import Settings, get_settings
from qrtix.app.db.session import open_stores
from qrtix.app.services.face_match import FaceMatchClient

# Import models so their tables are registered on Base.metadata
from qrtix.app import models  # noqa: F401

logger = logging.getLogger(__name__)

CORS_MAX_AGE_SECONDS = 12 * 60 * 60


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open long-lived resources once per process.

    Startup: connect both stores and create their tables (the primary is
    mandatory, a failing mirror is disabled), open the Face++ HTTP client.
    Shutdown: close the HTTP client and dispose both engines.
    """
    settings: Settings = app.state.settings

    stores = await open_stores(settings)
    app.state.stores = stores
    app.state.face_matcher = FaceMatchClient.from_settings(settings)
    logger.info(f"🚀 {settings.PROJECT_NAME} API ready")

    yield

    logger.info("Shutting down API...")
    await app.state.face_matcher.aclose()
    await stores.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["POST", "GET", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type"],
            expose_headers=["Content-Length"],
            max_age=CORS_MAX_AGE_SECONDS,
        )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["system"])
    async def root():
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
            "environment": settings.ENVIRONMENT,
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health", tags=["system"])
    async def health_check():
        """Reachability of the primary store and the local mirror."""
        stores = app.state.stores
        primary_ok = await stores.primary.ping(settings.STORE_TIMEOUT_SECONDS)

        if stores.secondary is None:
            mirror = "disabled"
        elif await stores.secondary.ping(settings.MIRROR_PROBE_TIMEOUT_SECONDS):
            mirror = "up"
        else:
            mirror = "down"

        return {
            "status": "healthy" if primary_ok else "unhealthy",
            "primary": "up" if primary_ok else "down",
            "mirror": mirror,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "qrtix.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
