"""
Company router: registration, verification, login, profile, logo, counters,
listings and password reset.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..accounts import (
    normalize_email,
    start_verification,
    verify_account,
    authenticate,
    request_password_reset,
    confirm_password_reset,
)
from ..auth import COMPANY, hash_password, create_access_token, get_current_company
from ..config import Settings
from ..db import get_db, get_settings
from ..models import Company
from ..schemas import (
    CompanyCreate,
    CompanyUpdate,
    CompanyProfile,
    CompanySummary,
    CompanyCard,
    LoginRequest,
    PasswordResetRequest,
    PasswordResetConfirm,
)
from ..utils.event_logger import log_account_event
from ..utils.uploads import save_image, resolve_image

router = APIRouter(prefix="/api/company", tags=["company"])
logger = logging.getLogger(__name__)

LOGOS = "logos"


@router.post("/register")
def register(
    payload: CompanyCreate,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(payload.email)
    legal_id = payload.legal_id.strip().lower()

    # Control de empresas duplicadas
    if db.query(Company).filter(or_(Company.email == email, Company.legal_id == legal_id)).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La empresa ya existe")

    company = Company(
        **payload.model_dump(exclude={"email", "legal_id", "password"}),
        email=email,
        legal_id=legal_id,
        password=hash_password(payload.password),
    )
    start_verification(company, COMPANY, settings)
    db.add(company)
    db.commit()
    db.refresh(company)

    log_account_event("register", COMPANY, company, request, db)
    return {
        "status": "success",
        "message": "Empresa registrada correctamente. Por favor verifica tu correo electrónico.",
        "company": CompanyProfile.model_validate(company),
    }


@router.get("/verify/{token}")
def verify(token: str, request: Request, db: Session = Depends(get_db)):
    verify_account(db, Company, COMPANY, token, request)
    return {"status": "success", "message": "Cuenta verificada correctamente."}


@router.post("/login")
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    company = authenticate(db, Company, COMPANY, credentials.email, credentials.password, request)
    token = create_access_token(company.id, COMPANY, settings, name=company.name)
    return {
        "status": "success",
        "message": "Empresa identificada correctamente",
        "user": {
            "id": company.id,
            "name": company.name,
            "email": company.email,
            "legal_id": company.legal_id,
            "verified": company.verified,
            "isCompany": True,
        },
        "token": token,
    }


@router.get("/profile/{company_id}")
def profile(company_id: int, db: Session = Depends(get_db)):
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No se encontró la empresa")
    return {"status": "success", "company": CompanyProfile.model_validate(company)}


@router.put("/update")
def update(
    payload: CompanyUpdate,
    current: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
        clash = db.query(Company).filter(Company.id != current.id, Company.email == changes["email"]).first()
        if clash:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El email ya está en uso")

    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    for field, value in changes.items():
        setattr(current, field, value)
    db.add(current)
    db.commit()
    db.refresh(current)

    return {
        "status": "success",
        "message": "Perfil de empresa actualizado correctamente",
        "company": CompanyProfile.model_validate(current),
    }


@router.post("/upload")
def upload(
    file0: UploadFile = File(...),
    current: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    filename = save_image(file0, settings.UPLOAD_DIR, LOGOS, current.id)
    current.image = filename
    db.add(current)
    db.commit()
    db.refresh(current)

    logger.info("Logo updated: company_id=%s file=%s", current.id, filename)
    return {"status": "success", "company": CompanyProfile.model_validate(current), "file": filename}


@router.get("/logo/{filename}")
def logo(filename: str, settings: Settings = Depends(get_settings)):
    return FileResponse(resolve_image(settings.UPLOAD_DIR, LOGOS, filename))


@router.get("/counters/{company_id}")
def counters(company_id: int):
    # Companies take no part in the follow graph and have no publications
    return {
        "status": "success",
        "companyId": company_id,
        "following": 0,
        "followed": 0,
        "publications": 0,
    }


@router.get("/list", response_model=List[CompanySummary])
def list_companies(db: Session = Depends(get_db)):
    return db.query(Company).order_by(Company.name).all()


@router.get("/sector/{sector}", response_model=List[CompanyCard])
def by_sector(sector: str, db: Session = Depends(get_db)):
    return db.query(Company).filter(Company.sectors == sector).order_by(Company.name).all()


@router.post("/password-reset/request")
def password_reset_request(
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return request_password_reset(db, Company, COMPANY, payload.email, settings)


@router.post("/password-reset/confirm")
def password_reset_confirm(payload: PasswordResetConfirm, request: Request, db: Session = Depends(get_db)):
    return confirm_password_reset(db, Company, COMPANY, payload.token, payload.new_password, request)
