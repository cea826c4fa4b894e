#!/usr/bin/env python3
"""
Users API Service
FastAPI application exposing CRUD operations over the users table

Run with:
    python -m services.database_service
    uvicorn services.database_service:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from core.config import ServiceConfig, load_config
from core.logger import setup_logging
from services import database_test_api, docs_api, users_api
from services.database import PostgresManager
from services.responses import register_exception_handlers

SERVICE_NAME = "users-api"


def create_app(config: Optional[ServiceConfig] = None,
               db: Optional[PostgresManager] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        config: Service configuration (loaded from the environment if None)
        db: Pool handle to use (built from config.database if None)

    Returns:
        Configured FastAPI app with the pool handle on app.state.db

    Raises:
        ConfigError: If the environment configuration is invalid
    """
    config = config or load_config()
    setup_logging(config.log_level, config.log_file)
    db = db or PostgresManager(config.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting Users API Service...")
        try:
            db.initialize()
            logger.info("✅ Users API Service ready")
        except Exception as e:
            logger.error(f"❌ Failed to connect to database, will retry on first request: {e}")
        yield
        logger.info("Shutting down Users API Service...")
        db.close()

    app = FastAPI(
        title="Users API",
        version="1.0.0",
        description="REST API with CRUD operations over the users table",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.db = db

    register_exception_handlers(app)

    @app.get("/health", include_in_schema=False)
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": SERVICE_NAME}

    app.include_router(users_api.router)
    app.include_router(database_test_api.router)
    app.include_router(docs_api.router)

    return app


def main():
    import uvicorn

    config = load_config()
    app = create_app(config)
    uvicorn.run(app, host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
