"""
Session authentication middleware.

Locates the session token on the request (auth cookie, then bearer header,
then query string), verifies it and exposes the caller to route handlers.
Also owns the auth cookie itself.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status

from shared.config import Settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser, Role
from modules.auth.extractors import default_extractors, extract_credential
from modules.auth.interfaces import ITokenService
from modules.accounts.interfaces import IAccountService

from ..dependencies import get_account_service, get_app_settings, get_token_service

logger = logging.getLogger(__name__)


class AuthError(HTTPException):
    """
    Authentication error with consistent format.

    The reason (missing, expired, malformed) is never exposed.
    """
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    """Authenticated, but the role is not sufficient."""
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def authenticate_request(
    request: Request,
    tokens: ITokenService,
    settings: Settings,
) -> AuthenticatedUser:
    """
    Authenticate a request from its first available credential.

    Raises:
        AuthError: If no credential is present or it fails verification
    """
    extractors = default_extractors(settings.auth_cookie_name, settings.token_query_param)
    token = extract_credential(request, extractors)
    if not token:
        raise AuthError()

    try:
        user = tokens.verify_session(token)
    except AuthenticationError as e:
        logger.debug(f"Rejected session token: {e.code}")
        raise AuthError()

    request.state.user = user
    return user


async def get_current_user(
    request: Request,
    tokens: ITokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return authenticate_request(request, tokens, settings)


async def get_optional_user(
    request: Request,
    tokens: ITokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Use this for endpoints that work with or without authentication.
    """
    try:
        return authenticate_request(request, tokens, settings)
    except AuthError:
        return None


async def require_admin(
    user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    accounts: IAccountService = Depends(get_account_service),
) -> AuthenticatedUser:
    """
    Dependency that requires an admin session.

    By default the role claimed by the token is trusted, so a demotion only
    takes effect once older tokens expire. With `recheck_role_on_admin`
    the stored role is read on every admin request instead.
    """
    role = user.role
    if settings.recheck_role_on_admin:
        role = await accounts.get_role(user.id)
        if role is None:
            raise AuthError()

    if role != Role.ADMIN:
        raise ForbiddenError()
    return user


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """
    Attach the session cookie.

    Production serves the front-end from another site, so the cookie must be
    `SameSite=None` and therefore `Secure`.
    """
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )
