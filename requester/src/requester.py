"""
Async client for the holiday proxy.

Turns each proxy call into a view-state action and applies it. Failures
never raise to the caller: a non-success status shows the proxy's error
text verbatim, and an unreachable proxy or unreadable body shows a fixed
fallback. No retries, no caching.
"""

from typing import Optional, Union

import httpx

from requester.src.models import Country, Holiday
from requester.src.state import (
    CountriesLoaded,
    HolidaysLoaded,
    RequestFailed,
    SubmitStarted,
    ViewState,
    reduce,
)
from shared.logging import get_logger

logger = get_logger(__name__)

FALLBACK_ERROR = "Failed to fetch holidays"
TRANSPORT_ERROR = "Error fetching data"


class HolidayRequester:
    """Calls GET /api/holidays and GET /api/countries on the proxy."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        :param base_url: Proxy base URL, e.g. http://localhost:5000
        :param timeout: Per-request timeout in seconds
        :param transport: Optional httpx transport (tests use MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("HolidayRequester must be used as an async context manager")
        return self._client

    async def fetch_holidays(self, country: str, year: str) -> Union[HolidaysLoaded, RequestFailed]:
        """Ask the proxy for one country's holidays in one year."""
        try:
            response = await self._http().get(
                "/api/holidays", params={"country": country, "year": year}
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("holiday_request_failed", country=country, year=year, error=str(e))
            return RequestFailed(TRANSPORT_ERROR)

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.info("holiday_request_rejected", status_code=response.status_code)
            return RequestFailed(message or FALLBACK_ERROR)

        try:
            holidays = tuple(Holiday.from_dict(item) for item in data.get("holidays") or [])
        except (AttributeError, TypeError) as e:
            logger.warning("holiday_payload_unreadable", error=str(e))
            return RequestFailed(TRANSPORT_ERROR)
        return HolidaysLoaded(holidays)

    async def fetch_countries(self) -> Optional[CountriesLoaded]:
        """Ask the proxy for the country list; None when it is unavailable."""
        try:
            response = await self._http().get("/api/countries")
            data = response.json()
            if not response.is_success:
                logger.warning("country_request_rejected", status_code=response.status_code)
                return None
            countries = tuple(Country.from_dict(item) for item in data.get("countries") or [])
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as e:
            logger.warning("country_request_failed", error=str(e))
            return None
        return CountriesLoaded(countries)

    async def submit(self, state: ViewState) -> ViewState:
        """Run the lookup for the snapshot's country and year."""
        state = reduce(state, SubmitStarted())
        outcome = await self.fetch_holidays(state.country, state.year)
        return reduce(state, outcome)

    async def load_countries(self, state: ViewState) -> ViewState:
        """Fill the country picker; leaves the snapshot as is on failure."""
        outcome = await self.fetch_countries()
        return reduce(state, outcome) if outcome is not None else state
