"""
Authentication endpoints.

Registration, login/logout, password reset and email verification. Mails
are handed to background tasks so delivery never affects the response.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from pydantic import BaseModel

from shared.config import Settings
from shared.mailer import Mailer
from shared.models import AuthenticatedUser
from modules.accounts.interfaces import IAccountService
from modules.accounts.models import (
    AccountPublic,
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    OutgoingMail,
    RegisterRequest,
    ResetPasswordRequest,
)

from ..dependencies import get_account_service, get_app_settings, get_mailer
from ..middleware.auth import (
    clear_session_cookie,
    get_current_user,
    get_optional_user,
    set_session_cookie,
)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If that email exists, a reset link was sent."


class LogoutResponse(BaseModel):
    ok: bool = True


class MeResponse(BaseModel):
    user: Optional[AccountPublic] = None


def queue_mail(background_tasks: BackgroundTasks, mailer: Mailer, mail: OutgoingMail) -> None:
    """Schedule best-effort delivery after the response is sent."""
    background_tasks.add_task(mailer.send, mail.to, mail.subject, mail.html)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    service: IAccountService = Depends(get_account_service),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    """
    Register a new account.

    The account starts unverified; a verification link is mailed.
    """
    result = await service.register(request)
    set_session_cookie(response, result.auth.token, settings)
    queue_mail(background_tasks, mailer, result.verification_mail)
    return result.auth


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: IAccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    auth = await service.login(request)
    set_session_cookie(response, auth.token, settings)
    return auth


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> LogoutResponse:
    clear_session_cookie(response, settings)
    return LogoutResponse()


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    service: IAccountService = Depends(get_account_service),
    mailer: Mailer = Depends(get_mailer),
) -> MessageResponse:
    """
    Request a password reset link.

    Always answers with the same message so the endpoint cannot be used to
    discover registered emails.
    """
    mail = await service.request_password_reset(request.email)
    if mail is not None:
        queue_mail(background_tasks, mailer, mail)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    service: IAccountService = Depends(get_account_service),
) -> MessageResponse:
    await service.reset_password(request.token, request.password)
    return MessageResponse(message="Password has been reset")


@router.get("/verify-email", response_model=MeResponse)
async def verify_email(
    token: str = Query(..., min_length=1),
    service: IAccountService = Depends(get_account_service),
) -> MeResponse:
    user = await service.verify_email(token)
    return MeResponse(user=user)


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    background_tasks: BackgroundTasks,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAccountService = Depends(get_account_service),
    mailer: Mailer = Depends(get_mailer),
) -> MessageResponse:
    mail = await service.issue_verification(user.id)
    queue_mail(background_tasks, mailer, mail)
    return MessageResponse(message="Verification email sent")


@router.get("/me", response_model=MeResponse)
async def me(
    response: Response,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IAccountService = Depends(get_account_service),
) -> MeResponse:
    """
    Get the caller's account, or `{"user": null}` when not logged in.

    Never fails for a missing or invalid session.
    """
    response.headers["Cache-Control"] = "no-store"
    if user is None:
        return MeResponse()
    return MeResponse(user=await service.get_public(user.id))
