"""
FastAPI dependency injection for the holiday proxy.

Provides injectable dependencies for:
- The immutable proxy context built during application startup
- The holiday service bound to that context

Route handlers never read settings or the environment directly.
"""

from fastapi import Depends, Request

from proxy.src.services.holiday_service import HolidayService, ProxyContext
from shared.logging import get_logger

logger = get_logger(__name__)


def get_proxy_context(request: Request) -> ProxyContext:
    """
    Get the proxy context stored on the application.

    Returns:
        ProxyContext created in the lifespan

    Raises:
        RuntimeError: If the application has not started up
    """
    context = getattr(request.app.state, "proxy_context", None)
    if context is None:
        logger.error("proxy_context_not_initialized")
        raise RuntimeError(
            "Proxy context not initialized. The application lifespan has not run."
        )
    return context


def get_holiday_service(
    context: ProxyContext = Depends(get_proxy_context),
) -> HolidayService:
    """Get a holiday service bound to the current proxy context."""
    return HolidayService(context)
