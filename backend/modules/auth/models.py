"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import Role


class SessionClaims(BaseModel):
    """
    Decoded session token payload.

    Carries only what authorization needs; everything else about the
    account is looked up when required.
    """

    sub: str = Field(..., description="Subject (account record ID)")
    role: Role = Field(..., description="Role at issuance time")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")


class SideToken(BaseModel):
    """
    Single-use opaque token for out-of-band flows.

    Used for password reset and email verification links.
    """

    token: str = Field(..., description="Hex-encoded random token")
    expires_at: Optional[datetime] = Field(
        None, description="Absolute expiry; None means the token never expires"
    )

    model_config = {"frozen": True}
