"""
Admin endpoints.

Account oversight and the manual copper price override. Every route
requires an admin session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.models import AuthenticatedUser
from modules.accounts.interfaces import IAccountService
from modules.accounts.models import (
    AccountDetail,
    AccountListResponse,
    AccountPublic,
    AccountStats,
    MessageResponse,
    UpdateRoleRequest,
    UpdateVerificationRequest,
    VerificationStatus,
)
from modules.pricing.interfaces import IPriceResolver
from modules.pricing.models import PricingConfigResponse, SetOverrideRequest

from ..dependencies import get_account_service, get_price_resolver
from ..middleware.auth import require_admin

router = APIRouter()


@router.get("/stats", response_model=AccountStats)
async def get_stats(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> AccountStats:
    return await service.get_stats()


@router.get("/users", response_model=AccountListResponse)
async def list_users(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(default=10, ge=1, le=100, description="Items per page"),
    status: Optional[VerificationStatus] = Query(default=None, description="Filter by status"),
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> AccountListResponse:
    """List accounts, newest first."""
    return await service.list_accounts(page, limit, status)


@router.get("/users/{record_id}", response_model=AccountDetail)
async def get_user(
    record_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> AccountDetail:
    return await service.get_detail(record_id)


@router.patch("/users/{record_id}/verification", response_model=AccountPublic)
async def update_verification(
    record_id: str,
    request: UpdateVerificationRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> AccountPublic:
    return await service.set_verification_status(record_id, request.verification_status)


@router.patch("/users/{record_id}/role", response_model=AccountPublic)
async def update_role(
    record_id: str,
    request: UpdateRoleRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> AccountPublic:
    """
    Change an account's role.

    Sessions already issued to the account keep their old role claim until
    they expire unless admin role re-checking is enabled.
    """
    return await service.set_role(admin.id, record_id, request.role)


@router.delete("/users/{record_id}", response_model=MessageResponse)
async def delete_user(
    record_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAccountService = Depends(get_account_service),
) -> MessageResponse:
    await service.delete_account(admin.id, record_id)
    return MessageResponse(message="User deleted")


@router.get("/pricing", response_model=PricingConfigResponse)
async def get_pricing(
    admin: AuthenticatedUser = Depends(require_admin),
    resolver: IPriceResolver = Depends(get_price_resolver),
) -> PricingConfigResponse:
    return PricingConfigResponse.from_config(await resolver.get_config())


@router.patch("/pricing", response_model=PricingConfigResponse)
async def set_pricing(
    request: SetOverrideRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    resolver: IPriceResolver = Depends(get_price_resolver),
) -> PricingConfigResponse:
    """Set the manual copper base price. Zero clears the override."""
    config = await resolver.set_override(request.base_copper_price)
    return PricingConfigResponse.from_config(config)


@router.delete("/pricing", response_model=PricingConfigResponse)
async def clear_pricing(
    admin: AuthenticatedUser = Depends(require_admin),
    resolver: IPriceResolver = Depends(get_price_resolver),
) -> PricingConfigResponse:
    return PricingConfigResponse.from_config(await resolver.clear_override())
