"""
Request logging middleware for FastAPI.

Provides:
- Correlation ID propagation (X-Correlation-ID)
- Request start/completion logging with duration
- Inbound request metrics
- Standard security headers on every response
"""

import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging import bind_context, get_logger, unbind_context
from shared.metrics import ProxyMetrics

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    def __init__(self, app, metrics: Optional[ProxyMetrics] = None, exempt_paths=()):
        super().__init__(app)
        self.metrics = metrics
        self.exempt_paths = set(exempt_paths)

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        quiet = path in self.exempt_paths

        bind_context(correlation_id=correlation_id)
        start_time = time.perf_counter()

        if not quiet:
            logger.info("request_started", method=method, path=path, client_ip=client_ip)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{time.perf_counter() - start_time:.3f}s",
                exc_info=True,
            )
            raise
        finally:
            unbind_context("correlation_id")

        duration = time.perf_counter() - start_time

        if self.metrics is not None and not quiet:
            self.metrics.http_requests.labels(
                method=method, endpoint=path, status=response.status_code
            ).inc()
            self.metrics.http_request_duration.labels(
                method=method, endpoint=path
            ).observe(duration)

        if not quiet:
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s",
                correlation_id=correlation_id,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
