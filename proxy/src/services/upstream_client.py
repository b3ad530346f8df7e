"""
Client for the upstream holiday API.

Sends exactly one GET per call and classifies the outcome into an
UpstreamResult variant. Upstream failures are reported as values, not
raised, so the calling service owns the mapping to client-facing errors.
"""

import asyncio
import functools
import time
import urllib.parse
from typing import Dict, Optional, Set

import httpx

from proxy.src.models.upstream import (
    UpstreamQuotaRestricted,
    UpstreamResult,
    UpstreamSuccess,
    UpstreamTransportFailure,
)
from shared.logging import get_logger
from shared.metrics import ProxyMetrics

logger = get_logger(__name__)

QUOTA_RESTRICTED_STATUS = 402
SENSITIVE_PARAMS = {"key"}
MASK = "***MASKED***"


class HolidayApiClient:
    """Thin async wrapper around the upstream holiday API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        metrics: Optional[ProxyMetrics] = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            http_client: Shared client
            base_url: Upstream base URL without trailing slash
            metrics: Optional metrics sink
            timeout: Seconds allowed for the whole call, body included
        """
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._metrics = metrics
        self._timeout = timeout
        self._pending: Set[asyncio.Task] = set()

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Mask credential query parameters for logging."""
        parsed = urllib.parse.urlparse(url)
        if not parsed.query:
            return url

        params = urllib.parse.parse_qs(parsed.query, keep_blank_values=True)
        sanitized = {
            k: [MASK] if k.lower() in SENSITIVE_PARAMS else v
            for k, v in params.items()
        }
        query = urllib.parse.urlencode(sanitized, doseq=True, safe="*")
        return f"{parsed.scheme}://{parsed.netloc}{parsed.path}?{query}"

    @staticmethod
    def _scrub(text: str, api_key: str) -> str:
        """Remove the credential from free-form error text."""
        if api_key:
            text = text.replace(api_key, MASK)
            text = text.replace(urllib.parse.quote(api_key, safe=""), MASK)
        return text

    def _record(self, resource: str, outcome: str, started: float) -> None:
        if self._metrics is None:
            return
        self._metrics.upstream_requests.labels(resource=resource, outcome=outcome).inc()
        self._metrics.upstream_request_duration.labels(resource=resource).observe(
            time.perf_counter() - started
        )

    async def _get(self, url: str) -> httpx.Response:
        return await asyncio.wait_for(self._http.get(url), self._timeout)

    def _finish_abandoned(
        self,
        resource: str,
        safe_url: str,
        api_key: str,
        started: float,
        task: asyncio.Task,
    ) -> None:
        """Log and count a call whose caller went away before it finished."""
        if task.cancelled():
            logger.warning(
                "upstream_request_abandoned",
                resource=resource,
                url=safe_url,
                outcome="cancelled",
            )
            return

        self._record(resource, "abandoned", started)
        error = task.exception()
        if error is None:
            logger.info(
                "upstream_request_abandoned",
                resource=resource,
                url=safe_url,
                outcome="completed",
                status_code=task.result().status_code,
            )
        else:
            logger.error(
                "upstream_request_abandoned",
                resource=resource,
                url=safe_url,
                outcome="failed",
                error=self._scrub(f"{type(error).__name__}: {error}", api_key),
            )

    async def drain(self) -> None:
        """Wait for calls still running on behalf of disconnected callers."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def fetch(self, resource: str, params: Dict[str, str], api_key: str) -> UpstreamResult:
        """
        Call GET <base>/<resource>?key=<api_key>&<params> once.

        The request runs in its own task, shielded from cancellation of the
        caller, so a client that disconnects does not abort it. The timeout
        bounds the whole call either way, and a call left behind by its
        caller is still logged and counted when it finishes.

        Args:
            resource: Upstream collection, e.g. "holidays"
            params: Query parameters besides the credential
            api_key: Upstream credential

        Returns:
            UpstreamSuccess, UpstreamQuotaRestricted or UpstreamTransportFailure
        """
        query = {"key": api_key, **params}
        url = f"{self._base_url}/{resource}?{urllib.parse.urlencode(query)}"
        safe_url = self._sanitize_url(url)

        logger.debug("upstream_request_started", resource=resource, url=safe_url)
        started = time.perf_counter()

        task = asyncio.ensure_future(self._get(url))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

        try:
            response = await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(
                functools.partial(self._finish_abandoned, resource, safe_url, api_key, started)
            )
            raise
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            self._record(resource, "transport_failure", started)
            logger.error(
                "upstream_request_failed",
                resource=resource,
                url=safe_url,
                reason="timeout",
                error_type=type(e).__name__,
            )
            return UpstreamTransportFailure(reason="timeout", error=type(e).__name__)
        except httpx.HTTPError as e:
            self._record(resource, "transport_failure", started)
            error = self._scrub(f"{type(e).__name__}: {e}", api_key)
            logger.error(
                "upstream_request_failed",
                resource=resource,
                url=safe_url,
                reason="network",
                error=error,
            )
            return UpstreamTransportFailure(reason="network", error=error)

        payload = self._decode(response)
        body_status = payload.get("status") if payload is not None else None

        if response.status_code == QUOTA_RESTRICTED_STATUS or body_status == QUOTA_RESTRICTED_STATUS:
            self._record(resource, "quota_restricted", started)
            logger.warning(
                "upstream_quota_restricted",
                resource=resource,
                url=safe_url,
                status_code=response.status_code,
            )
            return UpstreamQuotaRestricted(upstream_status=QUOTA_RESTRICTED_STATUS)

        if payload is None:
            self._record(resource, "transport_failure", started)
            logger.error(
                "upstream_request_failed",
                resource=resource,
                url=safe_url,
                reason="malformed_body",
                status_code=response.status_code,
            )
            return UpstreamTransportFailure(reason="malformed_body")

        if not response.is_success:
            self._record(resource, "transport_failure", started)
            logger.error(
                "upstream_request_failed",
                resource=resource,
                url=safe_url,
                reason="upstream_status",
                status_code=response.status_code,
                body_status=body_status,
            )
            return UpstreamTransportFailure(
                reason="upstream_status",
                error=f"HTTP {response.status_code}",
            )

        self._record(resource, "success", started)
        logger.info(
            "upstream_request_completed",
            resource=resource,
            url=safe_url,
            status_code=response.status_code,
        )
        return UpstreamSuccess(
            status_code=response.status_code,
            payload=payload,
            body=response.content,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Optional[dict]:
        """Parse the body as a JSON object, or None when it is not one."""
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None
