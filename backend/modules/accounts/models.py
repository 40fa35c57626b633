"""
Accounts module data models.

These models define the data structures used by the accounts module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from shared.models import Role

MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str:
    """Trim and lowercase an email so lookups are case-insensitive."""
    return email.strip().lower()


class VerificationStatus(str, Enum):
    """Verification state of an account."""

    UNVERIFIED = "unverified"
    VERIFIED = "verified"


class Account(BaseModel):
    """
    Full account record including security fields.

    Never returned from the API as-is; use `AccountPublic`.
    """

    id: str = Field(..., description="Record ID (primary key)")
    email: str = Field(..., description="Normalized email address")
    password_hash: str = Field(..., description="bcrypt hash of the current password")
    role: Role = Field(default=Role.USER)
    account_id: str = Field(..., description="Business identifier, PM-XXXXXXXXXX")
    verification_status: VerificationStatus = Field(default=VerificationStatus.UNVERIFIED)

    reset_token: Optional[str] = None
    reset_token_expires_at: Optional[datetime] = None
    email_verification_token: Optional[str] = None
    email_verification_expires_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public(self) -> "AccountPublic":
        return AccountPublic(
            id=self.id,
            email=self.email,
            role=self.role,
            account_id=self.account_id,
            verification_status=self.verification_status,
        )


class AccountPublic(BaseModel):
    """Canonical user-facing projection of an account."""

    id: str
    email: str
    role: Role
    account_id: str
    verification_status: VerificationStatus


class AccountProfile(BaseModel):
    """Contact and business details attached to an account."""

    full_name: str = ""
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    business_name: Optional[str] = None


class AccountSummary(AccountPublic):
    """Admin list item: projection plus creation time and name."""

    created_at: Optional[datetime] = None
    full_name: str = ""


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class _EmailRequest(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, str):
            return normalize_email(value)
        return value


class RegisterRequest(_EmailRequest):
    """Request to register a new account."""

    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    full_name: str = Field(..., min_length=2)
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    business_name: Optional[str] = None

    def to_profile(self) -> AccountProfile:
        return AccountProfile(
            full_name=self.full_name.strip(),
            phone=self.phone,
            address_line1=self.address_line1,
            city=self.city,
            postcode=self.postcode,
            business_name=self.business_name,
        )


class LoginRequest(_EmailRequest):
    """Request to log in with email and password."""

    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(_EmailRequest):
    """Request a password-reset link."""

    pass


class ResetPasswordRequest(BaseModel):
    """Redeem a password-reset token."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class ChangePasswordRequest(BaseModel):
    """Change password while logged in."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    full_name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    business_name: Optional[str] = None


class UpdateVerificationRequest(BaseModel):
    verification_status: VerificationStatus


class UpdateRoleRequest(BaseModel):
    role: Role


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class AuthResponse(BaseModel):
    """Returned after registration and login."""

    token: str
    user: AccountPublic


class AccountDetail(BaseModel):
    user: AccountPublic
    profile: Optional[AccountProfile] = None


class Pagination(BaseModel):
    total: int
    page: int
    pages: int


class AccountListResponse(BaseModel):
    users: list[AccountSummary]
    pagination: Pagination


class AccountStats(BaseModel):
    total_users: int
    verified_users: int
    unverified_users: int


class MessageResponse(BaseModel):
    message: str


class OutgoingMail(BaseModel):
    """A mail the caller should hand to the mail transport."""

    to: str
    subject: str
    html: str


class RegistrationResult(BaseModel):
    """Outcome of a registration: the session plus the verification mail."""

    auth: AuthResponse
    verification_mail: OutgoingMail
