"""
Article Service - Main Application
==================================

HTTP service exposing CRUD endpoints for articles and their authors.

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Article usecase and DTOs
- Domain: Article and Author entities
- Infrastructure: SQLAlchemy models, repositories, database connector

Wiring order: settings -> logging -> database -> repositories -> usecase ->
routes -> HTTP listener.
"""

import argparse
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Configuration and Core
from article_service.config import Settings, load_settings
from article_service.core import ConfigurationException, DatabaseConnectionException

# Infrastructure
from article_service.infrastructure.database import Database

# Module Routers
from article_service.article.interfaces import article_router

# Shared API
from article_service.shared.api.errors import register_exception_handlers
from article_service.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
)

# Logging
from article_service.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings, database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Loaded settings, stored on ``app.state.settings``
        database: Pre-built database; when omitted one is created from
            ``settings.database`` during startup

    Returns:
        FastAPI: The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan manager.

        STARTUP:
        1. Open the connection pool
        2. Verify connectivity (fatal on failure)

        SHUTDOWN:
        1. Close database connections
        """
        # === STARTUP ===
        logger.info("Starting Article Service", extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "address": settings.server.address
        })
        if settings.debug:
            logger.info("Service running in debug mode")

        db = app.state.database or Database.from_settings(settings.database, echo=settings.debug)
        try:
            await db.connect()
        except DatabaseConnectionException as e:
            logger.critical("Database unreachable, aborting startup", extra={"error": e.message})
            await db.close()
            raise
        app.state.database = db

        logger.info("Article Service started successfully")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("Shutting down Article Service")
        await db.close()
        logger.info("Article Service shutdown complete")

    app = FastAPI(
        title="Article Service API",
        description="""
        ## Articles and Authors

        CRUD endpoints for articles. Every article read embeds its author.

        **Endpoints:**
        - `GET /articles?num=10` - List newest articles
        - `GET /articles/{id}` - Get a single article
        - `POST /articles` - Create an article
        - `PUT|PATCH /articles/{id}` - Update supplied fields
        - `DELETE /articles/{id}` - Delete an article

        **Status codes:** 400 malformed input, 404 not found, 409 conflict,
        500 storage failure, 504 request deadline exceeded.
        """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    # === Middleware (last added runs first) ===
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # === Include Module Routers ===
    app.include_router(article_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for load balancers and orchestrators."""
        checks = {"database": "connected"}
        healthy = True

        db: Optional[Database] = request.app.state.database
        if db is None:
            checks["database"] = "not_initialized"
            healthy = False
        else:
            try:
                await db.ping()
            except DatabaseConnectionException as e:
                checks["database"] = f"error: {e.message}"
                healthy = False

        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "version": settings.app_version,
                "environment": settings.environment,
                "checks": checks
            }
        )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                "GET /articles - List articles",
                "GET /articles/{id} - Get article",
                "POST /articles - Create article",
                "PUT /articles/{id} - Update article",
                "DELETE /articles/{id} - Delete article"
            ]
        }

    return app


def main(argv: Optional[List[str]] = None) -> None:
    """Load settings, wire the application and serve it until interrupted."""
    parser = argparse.ArgumentParser(description="Article Service")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the config file (default: $ARTICLES_CONFIG or config.json)"
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigurationException as e:
        setup_logging()
        logger.critical("Failed to load configuration", extra={"error": e.message, **e.details})
        sys.exit(1)

    setup_logging(settings.effective_log_level, settings.environment)

    app = create_app(settings)

    # Startup failures (database unreachable, address in use) make uvicorn exit non-zero
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.effective_log_level.lower(),
        log_config=None
    )


# === Development Entry Point ===

if __name__ == "__main__":
    main()
