"""
Pricing module data models.

Prices are carried as Decimal internally and rounded to pence. Response
models expose plain numbers for JSON clients.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

PENNY = Decimal("0.01")
# Largest value the NUMERIC(12,2) price column holds
MAX_PRICE = Decimal("9999999999.99")

COMMODITY = "Copper (LME Grade A)"
CURRENCY = "GBP"
UNIT = "per Tonne"


def round_price(value: Decimal) -> Decimal:
    """Round a price to two decimal places, halves away from zero."""
    return value.quantize(PENNY, rounding=ROUND_HALF_UP)


class Provenance(str, Enum):
    """Which resolution tier produced a price."""

    MANUAL = "Manual"
    LIVE = "Live"
    FALLBACK = "Fallback"


PROVENANCE_SOURCES = {
    Provenance.MANUAL: "Admin Override",
    Provenance.LIVE: "Metals API",
    Provenance.FALLBACK: "Market Simulation Feed",
}


class LiveQuote(BaseModel):
    """A converted quote from the live feed."""

    price_per_tonne: Decimal = Field(..., description="GBP per tonne, rounded to pence")
    raw_unit_price: Decimal = Field(..., description="Upstream USD per pound")


class ResolvedPrice(BaseModel):
    """Copper base price with the tier that produced it."""

    price: Decimal
    provenance: Provenance
    resolved_at: datetime

    @property
    def source(self) -> str:
        return PROVENANCE_SOURCES[self.provenance]


class Material(BaseModel):
    """A scrap grade priced as a fraction of the copper base price."""

    key: str
    label: str
    recovery_rate: Decimal = Field(..., ge=0, le=1)
    processing_deduction: Decimal = Field(..., ge=0, le=1)

    model_config = {"frozen": True}

    @property
    def multiplier(self) -> Decimal:
        return self.recovery_rate - self.processing_deduction


class MaterialPrice(BaseModel):
    material: Material
    price: Decimal


class MaterialQuote(BaseModel):
    """Every material priced from one resolution of the base price."""

    base: ResolvedPrice
    materials: list[MaterialPrice]


class PricingConfig(BaseModel):
    """
    Singleton pricing configuration.

    `base_copper_price` is None when no manual override is set.
    """

    base_copper_price: Optional[Decimal] = None
    updated_at: Optional[datetime] = None

    @property
    def override_active(self) -> bool:
        return self.base_copper_price is not None and self.base_copper_price > 0


# -----------------------------------------------------------------------------
# API models
# -----------------------------------------------------------------------------


class SetOverrideRequest(BaseModel):
    """Set the manual base price. Zero clears the override."""

    base_copper_price: Decimal = Field(..., ge=0, le=MAX_PRICE)


class CopperPriceResponse(BaseModel):
    commodity: str = COMMODITY
    price: float
    currency: str = CURRENCY
    unit: str = UNIT
    last_updated: datetime
    source: str
    status: Provenance

    @classmethod
    def from_resolved(cls, resolved: ResolvedPrice) -> "CopperPriceResponse":
        return cls(
            price=float(resolved.price),
            last_updated=resolved.resolved_at,
            source=resolved.source,
            status=resolved.provenance,
        )


class MaterialPriceResponse(BaseModel):
    key: str
    label: str
    recovery_rate: float
    processing_deduction: float
    multiplier: float
    price: float


class MaterialPricesResponse(BaseModel):
    base: CopperPriceResponse
    materials: list[MaterialPriceResponse]

    @classmethod
    def from_quote(cls, quote: MaterialQuote) -> "MaterialPricesResponse":
        return cls(
            base=CopperPriceResponse.from_resolved(quote.base),
            materials=[
                MaterialPriceResponse(
                    key=item.material.key,
                    label=item.material.label,
                    recovery_rate=float(item.material.recovery_rate),
                    processing_deduction=float(item.material.processing_deduction),
                    multiplier=float(item.material.multiplier),
                    price=float(item.price),
                )
                for item in quote.materials
            ],
        )


class PricingConfigResponse(BaseModel):
    base_copper_price: Optional[float] = None
    override_active: bool
    updated_at: Optional[datetime] = None

    @classmethod
    def from_config(cls, config: PricingConfig) -> "PricingConfigResponse":
        return cls(
            base_copper_price=(
                float(config.base_copper_price) if config.override_active else None
            ),
            override_active=config.override_active,
            updated_at=config.updated_at,
        )
