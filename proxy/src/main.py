"""
FastAPI application entry point for the Holiday Proxy.

This module provides the main FastAPI application with:
- The proxied holiday and country endpoints
- Health and Prometheus metrics endpoints
- Request logging with correlation IDs
- CORS open to any origin
- Flat {"error": message} rendering for every failure
- Upstream HTTP client lifecycle management
"""

import uvicorn
import httpx
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_client import CONTENT_TYPE_LATEST

from proxy.src.config import get_settings, Settings
from proxy.src.exceptions import ProxyError
from proxy.src.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from proxy.src.models.holiday import HealthResponse
from proxy.src.routers import holidays
from proxy.src.services.holiday_service import ProxyContext
from proxy.src.services.upstream_client import HolidayApiClient
from shared.logging import configure_logging, get_logger
from shared.metrics import get_metrics_handler, setup_metrics

# Initialize logger
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the proxy application.

    Args:
        settings: Settings to use; defaults to the cached process settings
        transport: Optional httpx transport for the upstream client
            (tests pass an httpx.MockTransport)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    metrics = setup_metrics() if settings.metrics_enabled else None

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name="holiday-proxy",
        environment=settings.environment,
    )

    # ========================================================================
    # Lifespan Management
    # ========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Creates the shared upstream HTTP client and the immutable proxy
        context on startup, and closes the client on shutdown.
        """
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            upstream=settings.upstream_base_url,
        )

        if not settings.api_key_configured:
            logger.error(
                "api_key_not_configured",
                hint="set HOLIDAY_PROXY_API_KEY or API_KEY",
            )

        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        app.state.proxy_context = ProxyContext(
            api_key=settings.api_key,
            upstream=HolidayApiClient(
                http_client,
                settings.upstream_base_url,
                metrics=metrics,
                timeout=settings.upstream_timeout,
            ),
        )

        logger.info("application_started", port=settings.port)

        try:
            yield
        finally:
            logger.info("application_shutting_down")
            await app.state.proxy_context.upstream.drain()
            await http_client.aclose()
            app.state.proxy_context = None
            logger.info("application_shutdown_complete")

    # ========================================================================
    # FastAPI Application
    # ========================================================================

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Proxy in front of the Holiday API. Holds the API key server-side "
            "and normalizes upstream failures into a flat error shape."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # ========================================================================
    # Middleware Configuration
    # ========================================================================

    if settings.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=False,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        metrics=metrics,
        exempt_paths=("/health", settings.metrics_endpoint),
    )

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        """Render taxonomy errors as a flat error body."""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "proxy_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            cause=type(exc.original_error).__name__ if exc.original_error else None,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request"}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        logger.warning(
            "http_exception",
            path=request.url.path,
            status_code=exc.status_code,
            detail=exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "unexpected_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )

    # ========================================================================
    # Health and Metrics Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """
        Health check endpoint.

        Returns basic health status without contacting the upstream API.
        """
        return HealthResponse(
            status="healthy",
            service=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            api_key_configured=settings.api_key_configured,
        )

    if metrics is not None:
        metrics_handler = get_metrics_handler(metrics)

        @app.get(settings.metrics_endpoint, tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics_endpoint() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    # ========================================================================
    # API Router Registration
    # ========================================================================

    app.include_router(holidays.router, prefix=settings.api_prefix)

    return app


app = create_app()


def run() -> None:
    """Run the application with Uvicorn."""
    settings = get_settings()
    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "proxy.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
