"""
PropFlow entitlements API entry point
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.v1.router import api_router
from src.core.config import settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import setup_logging
from src.db.session import engine
from src.services.rate_limit import close_client


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release pools on shutdown."""
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
    yield
    await close_client()
    await engine.dispose()
    logger.info("Shutdown complete")


def create_application() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=f"{settings.API_PREFIX}/v1")

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "healthy", "version": settings.VERSION}

    return app


app = create_application()
