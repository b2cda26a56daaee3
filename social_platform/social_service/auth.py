from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Optional
import secrets
import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from .config import Settings
from .db import get_db, get_settings
from .models import User, Company

USER = "user"
COMPANY = "company"

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_token() -> str:
    """Random 32-byte hex token used for email verification and password resets."""
    return secrets.token_hex(32)


def create_access_token(account_id: int, kind: str, settings: Settings, name: Optional[str] = None) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": str(account_id),
        "kind": kind,
        "name": name,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def _token_claims(authorization: Optional[str], settings: Settings) -> dict:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="La petición no tiene la cabecera de autenticación")
    token = authorization.split(" ", 1)[1].strip()
    try:
        data = decode_access_token(token, settings)
        account_id = int(data["sub"])
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token no válido") from exc
    return {"id": account_id, "kind": data.get("kind")}


def get_current_user(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    claims = _token_claims(authorization, settings)
    if claims["kind"] != USER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Esta acción solo está disponible para usuarios")

    user = db.query(User).filter(User.id == claims["id"]).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="El usuario no existe")
    return user


def get_current_company(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Company:
    claims = _token_claims(authorization, settings)
    if claims["kind"] != COMPANY:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Esta acción solo está disponible para empresas")

    company = db.query(Company).filter(Company.id == claims["id"]).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="La empresa no existe")
    return company
