"""
Tests for account request and projection models.
"""

import pytest
from pydantic import ValidationError

from shared.models import Role
from modules.accounts.models import (
    Account,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    VerificationStatus,
)


class TestRequests:
    def test_email_is_normalized(self):
        request = LoginRequest(email="  Trader@Example.COM ", password="x")
        assert request.email == "trader@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="not-an-email", password="x")

    def test_register_requires_full_name(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="copper-pass-1")

    def test_register_profile_is_trimmed(self):
        request = RegisterRequest(
            email="a@example.com",
            password="copper-pass-1",
            full_name="  Ada Trader ",
            city="Leeds",
        )
        profile = request.to_profile()
        assert profile.full_name == "Ada Trader"
        assert profile.city == "Leeds"

    def test_change_password_mismatch(self):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            ChangePasswordRequest(
                current_password="old-password",
                new_password="new-password-1",
                confirm_password="new-password-2",
            )

    def test_profile_update_tracks_only_sent_fields(self):
        request = UpdateProfileRequest(phone="0113 000 0000")
        assert request.model_dump(exclude_unset=True) == {"phone": "0113 000 0000"}


class TestProjection:
    def test_public_projection_drops_security_fields(self):
        account = Account(
            id="rec-1",
            email="trader@example.com",
            password_hash="$2b$12$hash",
            role=Role.ADMIN,
            account_id="PM-0123456789",
            verification_status=VerificationStatus.VERIFIED,
            reset_token="secret",
        )

        public = account.to_public().model_dump()

        assert public == {
            "id": "rec-1",
            "email": "trader@example.com",
            "role": Role.ADMIN,
            "account_id": "PM-0123456789",
            "verification_status": VerificationStatus.VERIFIED,
        }
