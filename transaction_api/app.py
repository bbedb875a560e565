"""
Transaction API - Main Application.

Wires the transaction resource to a transaction service backend:
- HttpTransactionService when TRANSACTION_SERVICE_URL is configured
- InMemoryTransactionService otherwise
"""

from contextlib import asynccontextmanager
from typing import Any, Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings
from .logging_config import configure_logging
from .metrics import metrics_endpoint, track_request_metrics
from .middleware import PrometheusMiddleware, RequestLoggingMiddleware
from .routers.transactions import TransactionResource
from .services import HttpTransactionService, InMemoryTransactionService
from .services.transaction_service import TransactionService

configure_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)

logger = structlog.get_logger(__name__)

VERSION = "1.0.0"


def create_transaction_service(config: Settings = settings) -> TransactionService:
    """
    Build the transaction service selected by configuration.

    Args:
        config: Settings to read the backend URL, timeout and seed data from

    Returns:
        Remote client if a backend URL is set, in-memory store otherwise
    """
    if config.TRANSACTION_SERVICE_URL:
        return HttpTransactionService(
            base_url=config.TRANSACTION_SERVICE_URL,
            timeout=config.REQUEST_TIMEOUT,
        )

    logger.warning("TRANSACTION_SERVICE_URL not set, using in-memory transaction store")
    return InMemoryTransactionService(
        accounts=config.SEED_ACCOUNTS,
        categories=config.SEED_CATEGORIES,
    )


def create_app(
    service: Optional[TransactionService] = None,
    resource_logger: Optional[Any] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Transaction service; built from configuration when omitted
        resource_logger: Logger handed to the transaction resource
        config: Application settings

    Returns:
        Configured FastAPI application
    """
    transaction_service = service if service is not None else create_transaction_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(
            "Starting Transaction API",
            version=VERSION,
            backend=type(transaction_service).__name__,
        )

        yield

        logger.info("Shutting down Transaction API")
        close = getattr(transaction_service, "close", None)
        if close is not None:
            await close()
        logger.info("Transaction API stopped")

    app = FastAPI(
        title="Transaction API",
        description="REST resource for creating, reading, updating and deleting transactions",
        version=VERSION,
        docs_url="/docs" if config.DEBUG else None,
        redoc_url="/redoc" if config.DEBUG else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        expose_headers=["Content-Length", "X-Request-ID"],
        max_age=600,
    )
    app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)
    app.add_middleware(RequestLoggingMiddleware)

    resource = TransactionResource(transaction_service, logger=resource_logger)
    app.include_router(resource.router, prefix=config.API_PREFIX)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return await metrics_endpoint()

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": config.SERVICE_NAME,
            "version": VERSION,
            "backend": type(transaction_service).__name__,
        }

    return app


app = create_app()

