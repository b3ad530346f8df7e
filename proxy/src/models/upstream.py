"""Outcome of a single upstream call.

The upstream client never raises for upstream behaviour; it returns exactly
one of these variants and the service decides what the client sees.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union


@dataclass(frozen=True)
class UpstreamSuccess:
    """Upstream answered with a usable JSON object."""

    status_code: int
    payload: Dict[str, Any]
    body: bytes = field(repr=False)


@dataclass(frozen=True)
class UpstreamQuotaRestricted:
    """Upstream reported that the caller's plan does not cover the request."""

    upstream_status: int


@dataclass(frozen=True)
class UpstreamTransportFailure:
    """Network error, timeout, unusable body or unexpected upstream status."""

    reason: str
    error: str = ""


UpstreamResult = Union[UpstreamSuccess, UpstreamQuotaRestricted, UpstreamTransportFailure]
