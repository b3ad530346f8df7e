"""
Holiday router.

Provides the proxied lookups consumed by the client:
- GET /holidays?country=<code>&year=<year>
- GET /countries

Successful upstream bodies are forwarded byte-for-byte. Every failure is
raised as a ProxyError and rendered as {"error": message} by the handler
registered in main.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from proxy.src.dependencies import get_holiday_service
from proxy.src.models.holiday import CountryResponse, ErrorResponse, HolidayResponse
from proxy.src.models.upstream import UpstreamSuccess
from proxy.src.services.holiday_service import HolidayService
from shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    tags=["Holidays"],
    responses={
        402: {"model": ErrorResponse, "description": "Upstream plan restriction"},
        500: {"model": ErrorResponse, "description": "Misconfiguration or upstream failure"},
    },
)


def _forward(result: UpstreamSuccess) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type="application/json",
    )


@router.get(
    "/holidays",
    summary="List holidays",
    description="""
    Look up the holidays of a country for one year.

    The upstream payload is returned unchanged, including fields this API
    does not document.

    **Error Responses:**
    - 400: country or year missing
    - 402: year outside the upstream plan
    - 500: API key not configured, or upstream unreachable
    """,
    responses={
        200: {"model": HolidayResponse, "description": "Upstream holiday payload"},
        400: {"model": ErrorResponse, "description": "Missing parameter"},
    },
)
async def get_holidays(
    country: Optional[str] = Query(None, description="Country code, e.g. US"),
    year: Optional[str] = Query(None, description="Year, e.g. 2023"),
    service: HolidayService = Depends(get_holiday_service),
) -> Response:
    """Proxy a holiday lookup to the upstream API."""
    result = await service.get_holidays(country, year)
    return _forward(result)


@router.get(
    "/countries",
    summary="List countries",
    description="Countries supported by the upstream API, for the client's picker.",
    responses={200: {"model": CountryResponse, "description": "Upstream country payload"}},
)
async def get_countries(
    service: HolidayService = Depends(get_holiday_service),
) -> Response:
    """Proxy the country list so the client never needs the API key."""
    result = await service.get_countries()
    return _forward(result)
