"""
Pricing module.

Resolves the copper base price through its tiers (manual override, live
feed, simulation) and derives scrap material prices from it.

Public API:
- IPriceResolver / IPriceFeed: Interfaces for price resolution and quotes
- ResolvedPrice, Provenance: A base price and the tier that produced it
- Material, DEFAULT_MATERIALS: Scrap grades priced off the base
- UpstreamUnavailableError: Live feed failure (always recovered from)

The HTTP routes live in `modules.pricing.routes` and are mounted by the app.
"""

from .interfaces import IPriceFeed, IPriceResolver
from .materials import DEFAULT_MATERIALS
from .models import (
    LiveQuote,
    Material,
    MaterialPrice,
    MaterialQuote,
    PricingConfig,
    Provenance,
    ResolvedPrice,
    round_price,
)
from .exceptions import UpstreamUnavailableError

__all__ = [
    # Interfaces
    "IPriceFeed",
    "IPriceResolver",
    # Models
    "LiveQuote",
    "Material",
    "MaterialPrice",
    "MaterialQuote",
    "PricingConfig",
    "Provenance",
    "ResolvedPrice",
    "round_price",
    "DEFAULT_MATERIALS",
    # Exceptions
    "UpstreamUnavailableError",
]
