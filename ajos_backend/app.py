"""
FastAPI Application Entry Point
AJ OS Backend API Server

Usage:
    # Development with auto-reload
    uvicorn ajos_backend.app:app --reload

    # Production
    uvicorn ajos_backend.app:app --host 0.0.0.0 --port 8000

    # With custom config
    AJOS_CONFIG_FILE=/path/to/config.toml ajos start
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.loader import get_config
from core.logger import get_logger
from handlers import register_fastapi_routes
from system.runtime import get_runtime, start_runtime, stop_runtime

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI application lifecycle management"""
    logger.info("========== AJ OS Backend Starting ==========")

    try:
        # Builds cache, backend client and storage, then pulls every collection
        runtime = await start_runtime()
        mode = "synced" if runtime.backend.is_configured else "local-only"
        logger.info(f"✓ Runtime initialized ({mode} mode)")
        logger.info("========== AJ OS Backend Ready ==========")

    except Exception as e:
        logger.error(f"Failed to initialize backend: {e}", exc_info=True)
        raise

    yield

    logger.info("========== AJ OS Backend Shutting Down ==========")
    await stop_runtime(quiet=True)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="AJ OS Backend API",
        description="Personal operating system: tasks, daily logs, ideas, outcomes, network and insights",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_config().get("server.cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes using the @api_handler registry
    register_fastapi_routes(app, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": "AJ OS Backend API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        try:
            runtime = get_runtime()
            return {
                "status": "healthy",
                "service": "ajos-backend",
                "backend_configured": runtime.backend.is_configured,
            }
        except RuntimeError as e:
            logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "service": "ajos-backend",
                "error": str(e),
            }

    logger.info("✓ FastAPI application created with routes")
    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    config = get_config()
    host = config.get("server.host", "127.0.0.1")
    port = config.get("server.port", 8000)
    debug = config.get("server.debug", False)

    logger.info(f"Starting server at http://{host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if debug else "info",
    )
