"""
Self-service account endpoints.

All routes require a session.
"""

from fastapi import APIRouter, Depends

from shared.models import AuthenticatedUser
from modules.accounts.interfaces import IAccountService
from modules.accounts.models import (
    AccountDetail,
    AccountProfile,
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
)

from ..dependencies import get_account_service
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("", response_model=AccountDetail)
async def get_account(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAccountService = Depends(get_account_service),
) -> AccountDetail:
    """Get the caller's account projection and profile."""
    return await service.get_detail(user.id)


@router.put("/profile", response_model=AccountProfile)
async def update_profile(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAccountService = Depends(get_account_service),
) -> AccountProfile:
    return await service.update_profile(user.id, request)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAccountService = Depends(get_account_service),
) -> MessageResponse:
    await service.change_password(user.id, request)
    return MessageResponse(message="Password updated")
