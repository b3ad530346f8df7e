"""
Error taxonomy for the holiday proxy.

Every failure a client can see is a ProxyError carrying a fixed,
client-safe message and the HTTP status it is rendered with. All of them
end the request; none is retried.
"""

from fastapi import status


class ProxyError(Exception):
    """Base class for failures rendered to the client as {"error": message}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str = None, original_error: Exception = None):
        self.message = message or self.message
        self.original_error = original_error
        super().__init__(self.message)


class ValidationError(ProxyError):
    """The caller's request is incomplete."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Country and year are required"


class ConfigurationError(ProxyError):
    """The server is missing required setup."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "API key is not configured"


class QuotaRestricted(ProxyError):
    """The upstream plan does not cover the requested data."""

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    message = (
        "Access to current or future holiday data is restricted. "
        "Please upgrade your account."
    )


class UpstreamUnavailable(ProxyError):
    """The upstream API could not be reached or answered with garbage."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to fetch holiday data"
