"""
Copper price resolution.

Tiers are evaluated in order and the first usable value wins:

1. Manual: a positive admin override from the pricing config
2. Live: the converted quote from the price feed
3. Fallback: the reference price plus uniform jitter, which cannot fail

Material prices are derived from one resolved base price so every item in
a response is consistent.
"""

import logging
import random
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from shared.config import Settings, get_settings
from modules.auth.service import utc_now

from .exceptions import UpstreamUnavailableError
from .interfaces import IPriceFeed, IPriceResolver
from .materials import DEFAULT_MATERIALS
from .models import (
    MAX_PRICE,
    Material,
    MaterialPrice,
    MaterialQuote,
    PricingConfig,
    Provenance,
    ResolvedPrice,
    round_price,
)
from .repository import PricingConfigRepository

logger = logging.getLogger(__name__)


def price_material(base_price: Decimal, material: Material) -> MaterialPrice:
    """Price one material: base * (recovery_rate - processing_deduction)."""
    return MaterialPrice(
        material=material,
        price=round_price(base_price * material.multiplier),
    )


class PriceResolver(IPriceResolver):
    """
    Implementation of the tiered price resolver.

    The random source is injectable so the simulated tier can be made
    reproducible in tests.
    """

    def __init__(
        self,
        repository: PricingConfigRepository,
        feed: IPriceFeed,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repo = repository
        self._feed = feed
        self._settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._clock = clock

    async def resolve_copper_price(self) -> ResolvedPrice:
        override = self._read_override()
        if override is not None:
            logger.debug("Copper price resolved from manual override")
            return self._resolved(override, Provenance.MANUAL)

        try:
            quote = await self._feed.fetch_live_copper_price()
        except UpstreamUnavailableError as e:
            logger.warning(f"Live copper price unavailable, simulating: {e.reason}")
        except Exception:
            logger.exception("Unexpected price feed failure, simulating")
        else:
            logger.debug("Copper price resolved from live feed")
            return self._resolved(quote.price_per_tonne, Provenance.LIVE)

        return self._resolved(self._simulate(), Provenance.FALLBACK)

    async def get_material_prices(
        self,
        materials: Optional[Iterable[Material]] = None,
    ) -> MaterialQuote:
        base = await self.resolve_copper_price()
        items = materials if materials is not None else DEFAULT_MATERIALS
        return MaterialQuote(
            base=base,
            materials=[price_material(base.price, material) for material in items],
        )

    async def get_config(self) -> PricingConfig:
        return self._repo.get()

    async def set_override(self, price: Decimal) -> PricingConfig:
        if price < 0:
            raise ValueError("Override price must be non-negative")
        if price > MAX_PRICE:
            raise ValueError(f"Override price must not exceed {MAX_PRICE}")
        rounded = round_price(price)
        # Anything that rounds to zero pence means "no override"
        if rounded == 0:
            return await self.clear_override()

        config = self._repo.save(rounded)
        logger.info(f"Copper price override set to {config.base_copper_price}")
        return config

    async def clear_override(self) -> PricingConfig:
        config = self._repo.save(None)
        logger.info("Copper price override cleared")
        return config

    def _read_override(self) -> Optional[Decimal]:
        # A config read failure degrades to the next tier instead of failing the request
        try:
            config = self._repo.get()
        except Exception:
            logger.exception("Failed to read pricing config, skipping manual tier")
            return None
        return config.base_copper_price if config.override_active else None

    def _simulate(self) -> Decimal:
        jitter = float(self._settings.fallback_jitter)
        offset = Decimal(str(self._rng.uniform(-jitter, jitter)))
        return round_price(self._settings.fallback_copper_price + offset)

    def _resolved(self, price: Decimal, provenance: Provenance) -> ResolvedPrice:
        return ResolvedPrice(
            price=round_price(price),
            provenance=provenance,
            resolved_at=self._clock(),
        )

