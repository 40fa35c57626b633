"""
Default scrap grades priced off the copper base.
"""

from decimal import Decimal

from .models import Material

DEFAULT_MATERIALS: tuple[Material, ...] = (
    Material(
        key="bright_wire",
        label="Bright Bare Copper Wire",
        recovery_rate=Decimal("0.97"),
        processing_deduction=Decimal("0.05"),
    ),
    Material(
        key="copper_no1",
        label="No.1 Copper",
        recovery_rate=Decimal("0.95"),
        processing_deduction=Decimal("0.06"),
    ),
    Material(
        key="copper_no2",
        label="No.2 Copper",
        recovery_rate=Decimal("0.90"),
        processing_deduction=Decimal("0.08"),
    ),
    Material(
        key="copper_tube",
        label="Copper Tube",
        recovery_rate=Decimal("0.93"),
        processing_deduction=Decimal("0.07"),
    ),
    Material(
        key="insulated_cable",
        label="Insulated Copper Cable",
        recovery_rate=Decimal("0.65"),
        processing_deduction=Decimal("0.10"),
    ),
    Material(
        key="brass",
        label="Brass",
        recovery_rate=Decimal("0.62"),
        processing_deduction=Decimal("0.07"),
    ),
)
