"""
Pricing module interfaces.
"""

from decimal import Decimal
from typing import Iterable, Optional, Protocol, runtime_checkable

from .models import LiveQuote, Material, MaterialQuote, PricingConfig, ResolvedPrice


@runtime_checkable
class IPriceFeed(Protocol):
    """A single outbound source of live copper quotes."""

    async def fetch_live_copper_price(self) -> LiveQuote:
        """
        Fetch and convert one quote. No retries.

        Raises:
            UpstreamUnavailableError: On any failure to obtain a usable quote
        """
        ...


@runtime_checkable
class IPriceResolver(Protocol):
    """
    Tiered copper price resolution: manual override, live feed, simulation.

    Resolution never raises; the simulated tier always produces a value.
    """

    async def resolve_copper_price(self) -> ResolvedPrice:
        ...

    async def get_material_prices(
        self,
        materials: Optional[Iterable[Material]] = None,
    ) -> MaterialQuote:
        """Price every material from a single base price resolution."""
        ...

    async def get_config(self) -> PricingConfig:
        ...

    async def set_override(self, price: Decimal) -> PricingConfig:
        """Store a manual base price; zero clears the override."""
        ...

    async def clear_override(self) -> PricingConfig:
        ...
