"""
Public copper price endpoints.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_price_resolver

from .interfaces import IPriceResolver
from .models import CopperPriceResponse, MaterialPricesResponse

router = APIRouter()


@router.get("/copper", response_model=CopperPriceResponse)
async def get_copper_price(
    resolver: IPriceResolver = Depends(get_price_resolver),
) -> CopperPriceResponse:
    """
    Get the current copper base price.

    Always answers; `status` tells which tier produced the price.
    """
    return CopperPriceResponse.from_resolved(await resolver.resolve_copper_price())


@router.get("/materials", response_model=MaterialPricesResponse)
async def get_material_prices(
    resolver: IPriceResolver = Depends(get_price_resolver),
) -> MaterialPricesResponse:
    """Get prices for every scrap grade, all derived from one base price."""
    return MaterialPricesResponse.from_quote(await resolver.get_material_prices())
