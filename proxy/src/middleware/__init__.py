"""FastAPI middleware components.

This package contains custom middleware for request/response processing:
correlation IDs, request logging, metrics and security headers.
"""

from proxy.src.middleware.request_logging import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
