"""
User router: registration, verification, login, profile, avatar, counters and
password reset.
"""
import logging
from typing import Optional
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
from ..auth import USER, hash_password, create_access_token, get_current_user
from ..config import Settings
from ..db import get_db, get_settings
from ..follow_service import FollowService
from ..follow_store import FollowStore
from ..models import User, Publication
from ..schemas import (
    UserCreate,
    UserUpdate,
    LoginRequest,
    UserProfile,
    PublicUser,
    FollowRead,
    PasswordResetRequest,
    PasswordResetConfirm,
)
from ..utils.event_logger import log_account_event
from ..utils.pagination import paginate, check_page
from ..utils.uploads import save_image, resolve_image
from .follow import get_follow_store, get_follow_service

router = APIRouter(prefix="/api/user", tags=["user"])
logger = logging.getLogger(__name__)

AVATARS = "avatars"


@router.post("/register")
def register(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = normalize_email(payload.email)
    nick = payload.nick.strip().lower()

    # Control de usuarios duplicados
    if db.query(User).filter(or_(User.email == email, User.nick == nick)).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El usuario ya existe")

    user = User(
        name=payload.name,
        surname=payload.surname,
        nick=nick,
        email=email,
        password=hash_password(payload.password),
        bio=payload.bio,
    )
    start_verification(user, USER, settings)
    db.add(user)
    db.commit()
    db.refresh(user)

    log_account_event("register", USER, user, request, db)
    return {
        "status": "success",
        "message": "Usuario registrado correctamente. Por favor verifica tu correo electrónico.",
        "user": UserProfile.model_validate(user),
    }


@router.get("/verify/{token}")
def verify(token: str, request: Request, db: Session = Depends(get_db)):
    verify_account(db, User, USER, token, request)
    return {"status": "success", "message": "Cuenta verificada correctamente."}


@router.post("/login")
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = authenticate(db, User, USER, credentials.email, credentials.password, request)
    token = create_access_token(user.id, USER, settings, name=user.name)
    return {
        "status": "success",
        "message": "Te has identificado correctamente",
        "user": {
            "id": user.id,
            "name": user.name,
            "nick": user.nick,
            "verified": user.verified,
            "isCompany": False,
        },
        "token": token,
    }


@router.get("/profile/{user_id}")
def profile(
    user_id: int,
    current: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="El usuario no existe")

    status_info = service.mutual_status(current.id, user.id)
    return {
        "status": "success",
        "user": PublicUser.model_validate(user),
        "following": FollowRead.model_validate(status_info["following"]) if status_info["following"] else None,
        "follower": FollowRead.model_validate(status_info["follower"]) if status_info["follower"] else None,
    }


@router.get("/list")
@router.get("/list/{page}")
def list_users(
    page: int = 1,
    current: User = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    check_page(page)
    result = paginate(db.query(User).order_by(User.id), page, settings.USERS_PAGE_SIZE)
    relationships = service.resolve_relationships(current.id)
    return {
        "status": "success",
        "users": [PublicUser.model_validate(u) for u in result.items],
        "page": page,
        "itemsPerPage": settings.USERS_PAGE_SIZE,
        "total": result.total,
        "pages": result.pages,
        "user_following": relationships.get("following", []),
        "user_follow_me": relationships.get("followers", []),
    }


@router.put("/update")
def update(
    payload: UserUpdate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
    if "nick" in changes:
        changes["nick"] = changes["nick"].strip().lower()

    clashes = []
    if "email" in changes:
        clashes.append(User.email == changes["email"])
    if "nick" in changes:
        clashes.append(User.nick == changes["nick"])
    if clashes and db.query(User).filter(User.id != current.id, or_(*clashes)).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El email o el nick ya están en uso")

    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    for field, value in changes.items():
        setattr(current, field, value)
    db.add(current)
    db.commit()
    db.refresh(current)

    return {
        "status": "success",
        "message": "Usuario actualizado correctamente",
        "user": UserProfile.model_validate(current),
    }


@router.post("/upload")
def upload(
    file0: UploadFile = File(...),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    filename = save_image(file0, settings.UPLOAD_DIR, AVATARS, current.id)
    current.image = filename
    db.add(current)
    db.commit()
    db.refresh(current)

    logger.info("Avatar updated: user_id=%s file=%s", current.id, filename)
    return {"status": "success", "user": PublicUser.model_validate(current), "file": filename}


@router.get("/avatar/{filename}")
def avatar(filename: str, settings: Settings = Depends(get_settings)):
    return FileResponse(resolve_image(settings.UPLOAD_DIR, AVATARS, filename))


@router.get("/counters")
@router.get("/counters/{user_id}")
def counters(
    user_id: Optional[int] = None,
    current: User = Depends(get_current_user),
    store: FollowStore = Depends(get_follow_store),
    db: Session = Depends(get_db),
):
    target_id = user_id if user_id is not None else current.id
    return {
        "status": "success",
        "userId": target_id,
        "following": store.count_by_follower(target_id),
        "followed": store.count_by_followed(target_id),
        "publications": db.query(Publication).filter(Publication.user_id == target_id).count(),
    }


@router.post("/password-reset/request")
def password_reset_request(
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return request_password_reset(db, User, USER, payload.email, settings)


@router.post("/password-reset/confirm")
def password_reset_confirm(payload: PasswordResetConfirm, request: Request, db: Session = Depends(get_db)):
    return confirm_password_reset(db, User, USER, payload.token, payload.new_password, request)
