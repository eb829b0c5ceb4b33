"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resource_search.config import get_settings
from resource_search.infrastructure.dependencies import build_container
from resource_search.infrastructure.logging.log_config import setup_logging
from resource_search.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: load the index, start the midnight scheduler."""
    settings = get_settings()
    setup_logging()

    # 0. Missing provider credential is fatal (raises ConfigurationError)
    api_key = settings.require_openai_api_key()

    # 1. Wire services
    container = build_container(settings, api_key)
    app.state.container = container

    # 2. Serve the cached snapshot, or build the first one
    try:
        count = await container.refresh_service.load_initial()
    except Exception:
        logger.exception("Failed to load embeddings")
        await container.aclose()
        raise
    logger.info("Loaded %d training resources", count)

    # 3. Daily refresh at local midnight
    await container.scheduler.start()

    yield

    # Shutdown
    await container.scheduler.stop()
    await container.aclose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "resource_search.main:app",
        host="0.0.0.0",
        port=get_settings().port,
    )
