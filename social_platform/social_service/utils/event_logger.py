"""
Logging setup and the account event logger.
"""
from datetime import datetime
from typing import Optional
from fastapi import Request
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import sys
import logging
import os

from ..config import Settings
from ..models import AccountEvent

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "email_verified",
    "password_reset"
}


def configure_logging(settings: Settings) -> None:
    """
    Configure stdout logging, plus a file handler when LOG_DIR is set.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    # Try to add file handler, but continue without it if directory creation fails
    if settings.LOG_DIR:
        try:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(settings.LOG_DIR, "social_service.log")))
        except (OSError, PermissionError) as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers
    )


def log_account_event(
    event_type: str,
    account_kind: str,
    account,
    request: Optional[Request],
    db: Session,
    metadata: dict = None
) -> None:
    """
    Log an authentication event for a user or a company to the database.

    Args:
        event_type: One of: register, login_success, login_failure,
                    email_verified, password_reset
        account_kind: "user" or "company"
        account: User or Company row
        request: FastAPI Request object, used for IP and user agent
        db: Database session
        metadata: Optional dictionary of additional context

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    ip_address = None
    user_agent = None
    if request is not None:
        if request.client:
            ip_address = request.client.host

        # Check for X-Forwarded-For header (proxy/load balancer scenarios)
        if not ip_address and request.headers.get("x-forwarded-for"):
            ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

        user_agent = request.headers.get("user-agent")

    try:
        event = AccountEvent(
            account_kind=account_kind,
            account_id=account.id,
            email=account.email,
            event_type=event_type,
            ip_address=ip_address,
            user_agent=user_agent,
            timestamp=datetime.utcnow(),
            event_metadata=metadata or {}
        )

        db.add(event)
        db.commit()

        logger.info(
            "ACCOUNT %s kind=%s id=%s email=%s ip=%s",
            event_type, account_kind, account.id, account.email, ip_address
        )

    except SQLAlchemyError as e:
        # Logging failure must not break the auth flow
        logger.warning(
            "Failed to log account event - kind=%s id=%s event_type=%s error=%s",
            account_kind, account.id, event_type, e
        )
        db.rollback()
