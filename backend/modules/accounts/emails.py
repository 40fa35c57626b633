"""
Mail templates for account flows.
"""

from urllib.parse import urlencode

from .models import OutgoingMail

RESET_SUBJECT = "Password Reset Request - Pinnacle Metals"
VERIFY_SUBJECT = "Verify Your Email - Pinnacle Metals"

_BUTTON_STYLE = (
    "display: inline-block; padding: 12px 24px; background-color: {color}; "
    "color: white; text-decoration: none; border-radius: 4px;"
)


def build_link(origin: str, path: str, token: str) -> str:
    """Build a front-end link carrying a side token in its query string."""
    return f"{origin.rstrip('/')}/{path.lstrip('/')}?{urlencode({'token': token})}"


def password_reset_mail(to: str, reset_link: str, ttl_minutes: int) -> OutgoingMail:
    html = f"""
    <h1>Password Reset Request</h1>
    <p>You requested a password reset for your Pinnacle Metals account.</p>
    <p>Click the link below to set a new password. This link will expire in {ttl_minutes} minutes.</p>
    <a href="{reset_link}" style="{_BUTTON_STYLE.format(color='#007bff')}">Reset Password</a>
    <p>If you didn't request this, you can safely ignore this email.</p>
    """
    return OutgoingMail(to=to, subject=RESET_SUBJECT, html=html)


def verification_mail(to: str, verification_link: str) -> OutgoingMail:
    html = f"""
    <h1>Verify Your Email</h1>
    <p>Thank you for registering with Pinnacle Metals.</p>
    <p>Please click the link below to verify your email address and activate your account.</p>
    <a href="{verification_link}" style="{_BUTTON_STYLE.format(color='#28a745')}">Verify Email</a>
    <p>If you didn't register, please ignore this email.</p>
    """
    return OutgoingMail(to=to, subject=VERIFY_SUBJECT, html=html)
