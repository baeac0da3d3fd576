"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mailblocks import __version__
from mailblocks.api.schemas import ErrorResponse
from mailblocks.api.templates import router as templates_router
from mailblocks.core.config import Settings, get_settings
from mailblocks.core.factory import ComponentFactory
from mailblocks.core.logging_config import setup_logging
from mailblocks.interfaces.renderer import MalformedBlockError
from mailblocks.strategies.email_engine.catalog import get_system_template_slugs

# Initialize logging before importing other modules
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Builds the engine components once at startup so the first request does
    not pay for it.
    """
    factory: ComponentFactory = app.state.factory

    # Startup
    logger.info("Starting mailblocks API...")
    factory.get_renderer()
    factory.get_importer()
    factory.get_generator()
    logger.info(f"Catalog loaded: {len(get_system_template_slugs())} system templates")

    yield

    # Shutdown
    logger.info("Shutting down mailblocks API...")
    factory.clear_cache()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    try:
        settings = settings or get_settings()

        app = FastAPI(
            title="mailblocks",
            description="Semantic email block renderer, importer and generator",
            version=__version__,
            lifespan=lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        # Store settings and components in app state
        app.state.settings = settings
        app.state.factory = ComponentFactory(settings)

        # CORS middleware
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Include routers
        app.include_router(templates_router)
        logger.info("Registered templates router")

        # Health check endpoint
        @app.get("/health", tags=["health"])
        async def health_check():
            """Health check endpoint for load balancers and monitoring."""
            return {
                "status": "healthy",
                "service": "mailblocks-api",
                "version": __version__,
            }

        # Exception handlers
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

        @app.exception_handler(MalformedBlockError)
        async def malformed_block_handler(request, exc: MalformedBlockError):
            """Handle malformed blocks that escaped a route."""
            logger.warning(f"Malformed block: {exc}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=ErrorResponse(
                    detail=exc.message,
                    error_code="MALFORMED_BLOCK",
                    extra={"block_id": exc.block_id, "field": exc.field},
                ).model_dump(),
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

    except Exception as e:
        logger.error(f"Failed to create FastAPI app: {e}", exc_info=True)
        raise


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "mailblocks.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
