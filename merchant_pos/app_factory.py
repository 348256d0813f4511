"""
Application factory for the Merchant POS FastAPI application.

This module builds the FastAPI app: CORS, rate limiting, the versioned and
root-mounted routers, and the health check.
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .db import init_db
from .limiter import limiter
from .routes import (
    admin_dishes_router,
    admin_inventory_router,
    orders_router,
    receipts_router,
)

logger = logging.getLogger(__name__)

ROUTERS = (
    admin_inventory_router,
    admin_dishes_router,
    orders_router,
    receipts_router,
)


def create_app() -> FastAPI:
    """
    Create a FastAPI application.

    Tables are created on the configured database if they do not exist yet.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Merchant POS API",
        description="Dine-in ordering, inventory tracking and checkout receipts",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Include routers with API version prefix
    api_v1 = APIRouter(prefix="/api/v1")
    for router in ROUTERS:
        api_v1.include_router(router)
    app.include_router(api_v1)

    # Also mount at root
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    init_db()
    logger.info("Application created with %d routers", len(ROUTERS))

    return app
