"""
Live copper quote feed.

Calls a metals quote API once per request and converts its USD-per-pound
copper rate into GBP per tonne. The endpoint and key come from settings;
the feed counts as unavailable when either is missing.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from shared.config import Settings, get_settings

from .exceptions import UpstreamUnavailableError
from .interfaces import IPriceFeed
from .models import LiveQuote, round_price

logger = logging.getLogger(__name__)

LBS_PER_TONNE = Decimal("2204.62")
COPPER_SYMBOL = "XCU"


class QuoteRates(BaseModel):
    XCU: Decimal = Field(..., gt=0, description="USD per pound")


class QuoteResponse(BaseModel):
    """The subset of the upstream payload that is used; the rest is ignored."""

    success: bool
    rates: Optional[QuoteRates] = None


def convert_quote(usd_per_lb: Decimal, usd_to_gbp: Decimal) -> LiveQuote:
    """Convert a USD/lb quote into GBP per tonne, rounded to pence."""
    return LiveQuote(
        price_per_tonne=round_price(usd_per_lb * LBS_PER_TONNE * usd_to_gbp),
        raw_unit_price=usd_per_lb,
    )


class MetalsApiPriceFeed(IPriceFeed):
    """
    Price feed backed by a metals-api compatible HTTP endpoint.

    An httpx.AsyncClient can be injected (tests pass one built on
    httpx.MockTransport); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.copper_price_url and self._settings.metals_api_key)

    async def fetch_live_copper_price(self) -> LiveQuote:
        if not self.is_configured:
            raise UpstreamUnavailableError("feed not configured")

        try:
            if self._client is not None:
                response = await self._request(self._client)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._request(client)
            response.raise_for_status()
            quote = QuoteResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailableError(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            # The request URL carries the API key, so only the error type is kept
            raise UpstreamUnavailableError(type(e).__name__)
        except ValueError:
            # Covers undecodable JSON and pydantic validation failures
            raise UpstreamUnavailableError("malformed response")

        if not quote.success:
            raise UpstreamUnavailableError("quote service reported failure")
        if quote.rates is None:
            raise UpstreamUnavailableError("malformed response")

        logger.debug(f"Live copper quote: {quote.rates.XCU} USD/lb")
        return convert_quote(quote.rates.XCU, self._settings.usd_to_gbp_rate)

    async def _request(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.get(
            self._settings.copper_price_url,
            params={
                "access_key": self._settings.metals_api_key,
                "base": "USD",
                "symbols": COPPER_SYMBOL,
            },
            timeout=self._settings.price_feed_timeout_seconds,
        )

