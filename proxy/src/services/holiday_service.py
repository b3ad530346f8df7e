"""
Holiday proxy service.

Runs one lookup through Received → Validated → CredentialChecked →
UpstreamCalled and turns the upstream outcome into either the payload to
forward or one of the ProxyError subclasses. Validation and the
credential check both happen before any network call.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from proxy.src.exceptions import (
    ConfigurationError,
    QuotaRestricted,
    UpstreamUnavailable,
    ValidationError,
)
from proxy.src.models.holiday import HolidayQuery
from proxy.src.models.upstream import (
    UpstreamQuotaRestricted,
    UpstreamResult,
    UpstreamSuccess,
)
from proxy.src.services.upstream_client import HolidayApiClient
from shared.logging import get_logger

logger = get_logger(__name__)

COUNTRY_FETCH_FAILED = "Failed to fetch country data"


@dataclass(frozen=True)
class ProxyContext:
    """Request-handling context built once at startup and never mutated."""

    api_key: Optional[SecretStr]
    upstream: HolidayApiClient


class HolidayService:
    """Validates lookups, attaches the credential and maps upstream outcomes."""

    def __init__(self, context: ProxyContext):
        self._context = context

    def _require_credential(self) -> str:
        if self._context.api_key is None:
            logger.error("api_key_not_configured")
            raise ConfigurationError()
        return self._context.api_key.get_secret_value()

    @staticmethod
    def _unwrap(result: UpstreamResult, failure_message: str) -> UpstreamSuccess:
        if isinstance(result, UpstreamSuccess):
            return result
        if isinstance(result, UpstreamQuotaRestricted):
            raise QuotaRestricted()
        raise UpstreamUnavailable(failure_message)

    async def get_holidays(self, country: Optional[str], year: Optional[str]) -> UpstreamSuccess:
        """
        Look up the holidays of one country and year.

        Args:
            country: Country code from the query string
            year: Year from the query string

        Returns:
            The upstream success to forward unchanged

        Raises:
            ValidationError: country or year missing or empty
            ConfigurationError: no credential configured
            QuotaRestricted: upstream plan restriction
            UpstreamUnavailable: any other upstream or transport failure
        """
        try:
            query = HolidayQuery(country_code=country or "", year=year or "")
        except PydanticValidationError as e:
            logger.info("holiday_query_rejected", country=country, year=year)
            raise ValidationError(original_error=e) from e

        api_key = self._require_credential()

        result = await self._context.upstream.fetch(
            "holidays",
            {"country": query.country_code, "year": query.year},
            api_key,
        )
        return self._unwrap(result, UpstreamUnavailable.message)

    async def get_countries(self) -> UpstreamSuccess:
        """
        Look up the countries the upstream API knows about.

        Raises:
            ConfigurationError: no credential configured
            QuotaRestricted: upstream plan restriction
            UpstreamUnavailable: any other upstream or transport failure
        """
        api_key = self._require_credential()
        result = await self._context.upstream.fetch("countries", {}, api_key)
        return self._unwrap(result, COUNTRY_FETCH_FAILED)
