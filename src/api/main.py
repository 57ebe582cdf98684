"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.error_handlers import register_error_handlers
from src.api.routes import health, listings
from src.config import settings
from src.infrastructure.observability import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.log_level)
    logger.info(
        "market_ledger_starting",
        storage=settings.storage_backend,
        funds=settings.funds_backend,
    )
    yield
    logger.info("market_ledger_stopping")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Market Ledger",
        description="Listings and atomic purchases for a minimal marketplace.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(listings.router)

    return app


app = create_app()
