"""
Pricing config repository.

The `pricing_config` table holds at most one row, keyed by a fixed ID and
written with upsert so there is never a second live config.
"""

from decimal import Decimal
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import PricingConfig

PRICING_CONFIG_TABLE = "pricing_config"
CONFIG_ROW_ID = "default"


class PricingConfigRepository(BaseRepository[PricingConfig]):
    """Repository for the singleton pricing configuration."""

    def get(self) -> PricingConfig:
        """Get the config, or an empty one when the row has never been written."""
        result = (
            self._db.table(PRICING_CONFIG_TABLE)
            .select("*")
            .eq("id", CONFIG_ROW_ID)
            .execute()
        )
        if not result.data:
            return PricingConfig()
        return self._map_to_config(result.data[0])

    def save(self, base_copper_price: Optional[Decimal]) -> PricingConfig:
        """Upsert the singleton row, stamping `updated_at`."""
        data = {
            "id": CONFIG_ROW_ID,
            # numeric columns accept strings, which keeps Decimal precision
            "base_copper_price": str(base_copper_price) if base_copper_price is not None else None,
            "updated_at": self._now_iso(),
        }
        result = (
            self._db.table(PRICING_CONFIG_TABLE)
            .upsert(data, on_conflict="id")
            .execute()
        )
        return self._map_to_config(result.data[0])

    def _map_to_config(self, data: dict[str, Any]) -> PricingConfig:
        raw = data.get("base_copper_price")
        return PricingConfig(
            base_copper_price=Decimal(str(raw)) if raw is not None else None,
            updated_at=self._parse_datetime(data.get("updated_at")),
        )

