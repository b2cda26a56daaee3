"""
Outgoing account emails.

Delivery is out of scope for the service: messages are written to the log so
the links can be picked up in development.
"""
import logging

from .config import Settings

logger = logging.getLogger(__name__)


def send_verification_email(email: str, token: str, kind: str, settings: Settings) -> str:
    link = f"{settings.PUBLIC_BASE_URL}/api/{kind}/verify/{token}"
    logger.info("[MAIL] Verification link for %s: %s", email, link)
    return link


def send_password_reset_email(email: str, token: str, kind: str, settings: Settings) -> str:
    link = f"{settings.PUBLIC_BASE_URL}/reset-password?kind={kind}&token={token}"
    logger.info("[MAIL] Password reset link for %s: %s", email, link)
    return link
