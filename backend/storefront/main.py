"""
Storefront - Backend API
Catalog, customers, carts and orders over a pluggable repository layer
"""
import logging
import time
from typing import Optional

import psycopg2
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api import carts, customers, orders, products
from storefront.api.errors import register_exception_handlers
from storefront.core.config import Settings, get_settings
from storefront.core.database import get_db_connection_with_retry
from storefront.core.logging import configure_logging
from storefront.domain.exceptions import RepositoryError
from storefront.repositories.factory import Repositories, build_repositories

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, repositories: Optional[Repositories] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Defaults to the process-wide settings from the environment
        repositories: Defaults to the backend named by REPOSITORY_BACKEND
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if repositories is None:
        repositories = build_repositories(settings)

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG,
    )
    app.state.settings = settings
    app.state.repositories = repositories

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(customers.router, prefix="/api/v1/customers", tags=["Customers"])
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(carts.router, prefix="/api/v1/carts", tags=["Carts"])

    @app.get("/")
    def root():
        """Root endpoint - API status"""
        return {
            "message": settings.API_TITLE,
            "status": "online",
            "version": settings.API_VERSION,
            "backend": settings.REPOSITORY_BACKEND,
        }

    @app.get("/health")
    def health():
        """Health check - pings the database when running on PostgreSQL"""
        start_time = time.time()

        db_status = "not_used"
        db_latency_ms = None
        db_error = None

        if settings.REPOSITORY_BACKEND == "postgres":
            try:
                conn = get_db_connection_with_retry(
                    max_retries=1, retry_delay=0.5, database_url=settings.DATABASE_URL
                )
                cursor = conn.cursor()

                db_start = time.time()
                cursor.execute("SELECT 1")
                cursor.fetchone()
                db_latency_ms = round((time.time() - db_start) * 1000, 2)

                cursor.close()
                conn.close()
                db_status = "connected"
            except (psycopg2.Error, RepositoryError) as e:
                logger.warning(f"Health check could not reach the database: {e}")
                db_status = "disconnected"
                db_error = str(e)

        total_latency_ms = round((time.time() - start_time) * 1000, 2)

        return {
            "status": "degraded" if db_status == "disconnected" else "healthy",
            "service": "storefront-api",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms,
                "error": db_error,
            },
            "total_latency_ms": total_latency_ms,
        }

    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} ready ({settings.REPOSITORY_BACKEND} backend)")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
