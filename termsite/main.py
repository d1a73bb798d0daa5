"""FastAPI application entry point.

Application setup with routing, exception handling and the lifecycle of the
background generation scheduler.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from termsite.api.ingest import router as ingest_router
from termsite.api.pages import router as pages_router
from termsite.api.schemas import ErrorResponse
from termsite.core.config import Settings, get_settings
from termsite.core.factory import ComponentFactory
from termsite.core.logging_config import setup_logging
from termsite.storage.sample import seed_sample_data

logger = logging.getLogger(__name__)

SERVICE_NAME = "termsite"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Seeds demo data when configured, then runs the generation scheduler for
    as long as the application is up.
    """
    settings: Settings = app.state.settings
    factory: ComponentFactory = app.state.factory

    logger.info("Starting termsite...")

    executor = ThreadPoolExecutor(max_workers=settings.workers, thread_name_prefix="render")
    asyncio.get_running_loop().set_default_executor(executor)

    if settings.seed_sample_data:
        storages = factory.get_storages()
        seed_sample_data(storages.metrics, storages.logs, storages.traces)

    scheduler = factory.get_scheduler()
    await scheduler.run()

    yield

    logger.info("Shutting down termsite...")
    if scheduler.is_running:
        await scheduler.stop()
    executor.shutdown(wait=True)


def create_app(
    settings: Settings | None = None,
    factory: ComponentFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.
        factory: Optional component factory. If None, one is built from
            ``settings``.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    factory = factory or ComponentFactory(settings)

    app = FastAPI(
        title="termsite",
        description="Terminal-styled status site generator",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.factory = factory

    app.include_router(ingest_router)
    app.include_router(pages_router)
    logger.info("Registered ingest and pages routers")

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
        }

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "termsite.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.effective_log_level.lower(),
    )


if __name__ == "__main__":
    run()
