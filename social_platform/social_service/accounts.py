"""
Account flows shared by users and companies: email verification, login and
password reset.
"""
import logging
from datetime import datetime, timedelta

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from .auth import generate_token, hash_password, verify_password
from .config import Settings
from .mailer import send_verification_email, send_password_reset_email
from .models import PasswordResetToken
from .utils.event_logger import log_account_event

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "Si la cuenta existe, se ha enviado un enlace de recuperación."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def start_verification(account, kind: str, settings: Settings) -> str:
    """Attach a fresh verification token to an unsaved or unverified account and mail it."""
    token = generate_token()
    account.verification_token = token
    account.verified = False
    send_verification_email(account.email, token, kind, settings)
    return token


def verify_account(db: Session, model, kind: str, token: str, request: Request):
    account = db.query(model).filter(model.verification_token == token).first()
    if not account:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token de verificación inválido o expirado.")

    account.verified = True
    account.verification_token = None
    db.add(account)
    db.commit()
    db.refresh(account)

    log_account_event("email_verified", kind, account, request, db)
    return account


def authenticate(db: Session, model, kind: str, email: str, password: str, request: Request):
    account = db.query(model).filter(model.email == normalize_email(email)).first()
    if not account or not verify_password(password, account.password):
        if account:
            log_account_event("login_failure", kind, account, request, db)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciales incorrectas")

    log_account_event("login_success", kind, account, request, db)
    return account


def request_password_reset(db: Session, model, kind: str, email: str, settings: Settings) -> dict:
    # Generic response to prevent account enumeration
    generic_msg = {"status": "success", "message": RESET_REQUESTED_MESSAGE}

    account = db.query(model).filter(model.email == normalize_email(email)).first()
    if not account:
        return generic_msg

    token = generate_token()
    expires_at = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.add(PasswordResetToken(token=token, account_kind=kind, account_id=account.id, expires_at=expires_at, used=False))
    db.commit()

    send_password_reset_email(account.email, token, kind, settings)
    return generic_msg


def confirm_password_reset(db: Session, model, kind: str, token: str, new_password: str, request: Request):
    now = datetime.utcnow()
    prt = (
        db.query(PasswordResetToken)
        .filter(PasswordResetToken.token == token, PasswordResetToken.account_kind == kind)
        .first()
    )
    if not prt or prt.used or prt.expires_at < now:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token inválido o expirado")

    account = db.query(model).filter(model.id == prt.account_id).first()
    if not account:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token inválido")

    account.password = hash_password(new_password)
    prt.used = True
    db.add(account)
    db.add(prt)
    db.commit()

    log_account_event("password_reset", kind, account, request, db)
    return {"status": "success", "message": "Contraseña actualizada correctamente"}
