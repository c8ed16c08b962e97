"""
FastAPI Application Factory

Creates the reporting API around one loaded dataset.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from superstore_analytics.analytics.engine import SalesAnalyticsEngine
from superstore_analytics.config import get_settings
from superstore_analytics.exceptions import AnalyticsError
from superstore_analytics.ingestion import load_order_lines
from superstore_analytics.serving.api.middleware import RequestLoggingMiddleware
from superstore_analytics.serving.api.routes import health_router, reports_router

logger = structlog.get_logger(__name__)


def create_app(engine: Optional[SalesAnalyticsEngine] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        engine: Pre-built engine; when omitted the dataset at
            settings.data.dataset_path is loaded on startup

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.engine is None:
            try:
                app.state.engine = SalesAnalyticsEngine(load_order_lines())
            except (FileNotFoundError, ValueError, AnalyticsError) as e:
                logger.error("Dataset load failed", error=str(e))
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title="Superstore Sales Analytics API",
        description="Analytical reports over the super_store order lines",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.engine = engine

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])

    return app
