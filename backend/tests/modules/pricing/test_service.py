"""
Tests for the tiered copper price resolver.
"""

import pytest
import random
from datetime import datetime, timezone
from decimal import Decimal

from modules.pricing.interfaces import IPriceResolver
from modules.pricing.materials import DEFAULT_MATERIALS
from modules.pricing.models import LiveQuote, Material, Provenance, round_price
from modules.pricing.service import PriceResolver, price_material

from tests.conftest import FakePricingRepository, UnavailableFeed


FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class StaticFeed:
    """Feed that always returns the same quote."""

    def __init__(self, price: str = "7402.01"):
        self.calls = 0
        self.quote = LiveQuote(price_per_tonne=Decimal(price), raw_unit_price=Decimal("4.25"))

    async def fetch_live_copper_price(self) -> LiveQuote:
        self.calls += 1
        return self.quote


class BrokenFeed:
    """Feed failing with something other than UpstreamUnavailableError."""

    async def fetch_live_copper_price(self) -> LiveQuote:
        raise RuntimeError("unexpected")


class FailingRepository(FakePricingRepository):
    def get(self):
        raise ConnectionError("database unreachable")


def make_resolver(settings, repo=None, feed=None, seed: int = 7) -> PriceResolver:
    return PriceResolver(
        repo if repo is not None else FakePricingRepository(),
        feed if feed is not None else UnavailableFeed(),
        settings,
        rng=random.Random(seed),
        clock=lambda: FIXED_NOW,
    )


class TestRounding:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1234.565", "1234.57"),
            ("1234.564", "1234.56"),
            ("8000", "8000.00"),
        ],
    )
    def test_round_price(self, value, expected):
        assert round_price(Decimal(value)) == Decimal(expected)


class TestResolveCopperPrice:
    def test_implements_interface(self, settings):
        assert isinstance(make_resolver(settings), IPriceResolver)

    @pytest.mark.asyncio
    async def test_manual_override_wins(self, settings):
        feed = StaticFeed()
        resolver = make_resolver(settings, FakePricingRepository(Decimal("8125.40")), feed)

        resolved = await resolver.resolve_copper_price()

        assert resolved.price == Decimal("8125.40")
        assert resolved.provenance == Provenance.MANUAL
        assert resolved.source == "Admin Override"
        assert resolved.resolved_at == FIXED_NOW
        assert feed.calls == 0

    @pytest.mark.asyncio
    async def test_live_when_no_override(self, settings):
        feed = StaticFeed("7402.01")
        resolver = make_resolver(settings, feed=feed)

        resolved = await resolver.resolve_copper_price()

        assert resolved.price == Decimal("7402.01")
        assert resolved.provenance == Provenance.LIVE
        assert resolved.source == "Metals API"
        assert feed.calls == 1

    @pytest.mark.asyncio
    async def test_zero_override_is_inactive(self, settings):
        resolver = make_resolver(settings, FakePricingRepository(Decimal("0")), StaticFeed())

        resolved = await resolver.resolve_copper_price()

        assert resolved.provenance == Provenance.LIVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(20))
    async def test_fallback_stays_within_jitter(self, settings, seed):
        resolver = make_resolver(settings, seed=seed)

        resolved = await resolver.resolve_copper_price()

        assert resolved.provenance == Provenance.FALLBACK
        assert resolved.source == "Market Simulation Feed"
        assert Decimal("6820.50") <= resolved.price <= Decimal("6860.50")
        assert resolved.price == round_price(resolved.price)

    @pytest.mark.asyncio
    async def test_fallback_is_reproducible_with_seed(self, settings):
        first = await make_resolver(settings, seed=3).resolve_copper_price()
        second = await make_resolver(settings, seed=3).resolve_copper_price()

        assert first.price == second.price

    @pytest.mark.asyncio
    async def test_unexpected_feed_error_falls_back(self, settings):
        resolver = make_resolver(settings, feed=BrokenFeed())

        resolved = await resolver.resolve_copper_price()

        assert resolved.provenance == Provenance.FALLBACK

    @pytest.mark.asyncio
    async def test_config_read_failure_skips_manual_tier(self, settings):
        resolver = make_resolver(settings, FailingRepository(), StaticFeed())

        resolved = await resolver.resolve_copper_price()

        assert resolved.provenance == Provenance.LIVE


class TestMaterialPrices:
    def test_price_material(self):
        material = Material(
            key="test",
            label="Test",
            recovery_rate=Decimal("0.90"),
            processing_deduction=Decimal("0.08"),
        )

        priced = price_material(Decimal("7402.01"), material)

        # 7402.01 * 0.82 = 6069.6482
        assert priced.price == Decimal("6069.65")

    @pytest.mark.asyncio
    async def test_all_materials_from_one_base(self, settings):
        resolver = make_resolver(settings, FakePricingRepository(Decimal("8000")))

        quote = await resolver.get_material_prices()

        assert quote.base.price == Decimal("8000.00")
        prices = {item.material.key: item.price for item in quote.materials}
        assert prices == {
            "bright_wire": Decimal("7360.00"),
            "copper_no1": Decimal("7120.00"),
            "copper_no2": Decimal("6560.00"),
            "copper_tube": Decimal("6880.00"),
            "insulated_cable": Decimal("4400.00"),
            "brass": Decimal("4400.00"),
        }

    @pytest.mark.asyncio
    async def test_fallback_base_resolved_once(self, settings):
        """Every material must be derived from the same simulated base."""
        resolver = make_resolver(settings)

        quote = await resolver.get_material_prices()

        assert quote.base.provenance == Provenance.FALLBACK
        for item in quote.materials:
            assert item.price == round_price(quote.base.price * item.material.multiplier)

    @pytest.mark.asyncio
    async def test_custom_material_list(self, settings):
        resolver = make_resolver(settings, FakePricingRepository(Decimal("8000")))

        quote = await resolver.get_material_prices(DEFAULT_MATERIALS[:1])

        assert [item.material.key for item in quote.materials] == ["bright_wire"]


class TestOverride:
    @pytest.mark.asyncio
    async def test_set_override_rounds(self, settings):
        repo = FakePricingRepository()
        resolver = make_resolver(settings, repo)

        config = await resolver.set_override(Decimal("8100.555"))

        assert config.base_copper_price == Decimal("8100.56")
        assert config.override_active is True
        assert config.updated_at is not None

    @pytest.mark.asyncio
    async def test_zero_clears_override(self, settings):
        repo = FakePricingRepository(Decimal("8000"))
        resolver = make_resolver(settings, repo)

        config = await resolver.set_override(Decimal("0"))

        assert config.base_copper_price is None
        assert config.override_active is False

    @pytest.mark.asyncio
    async def test_sub_penny_override_clears(self, settings):
        """A value that rounds to zero pence is stored as no override, never as 0.00."""
        repo = FakePricingRepository(Decimal("8000"))
        resolver = make_resolver(settings, repo)

        config = await resolver.set_override(Decimal("0.004"))

        assert repo.config.base_copper_price is None
        assert config.override_active is False

    @pytest.mark.asyncio
    async def test_half_penny_rounds_up_to_an_override(self, settings):
        resolver = make_resolver(settings, FakePricingRepository())

        config = await resolver.set_override(Decimal("0.005"))

        assert config.base_copper_price == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_above_column_range_rejected(self, settings):
        repo = FakePricingRepository()
        resolver = make_resolver(settings, repo)

        with pytest.raises(ValueError):
            await resolver.set_override(Decimal("10000000000"))
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_negative_rejected(self, settings):
        repo = FakePricingRepository()
        resolver = make_resolver(settings, repo)

        with pytest.raises(ValueError):
            await resolver.set_override(Decimal("-1"))
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_clear_override_returns_to_live(self, settings):
        repo = FakePricingRepository(Decimal("8000"))
        resolver = make_resolver(settings, repo, StaticFeed())

        await resolver.clear_override()
        resolved = await resolver.resolve_copper_price()

        assert resolved.provenance == Provenance.LIVE
        assert (await resolver.get_config()).override_active is False
