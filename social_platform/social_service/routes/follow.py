"""
Follow router: follow/unfollow and paginated following/follower listings.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..config import Settings
from ..db import get_db, get_settings
from ..follow_service import FollowService
from ..follow_store import FollowStore, SelfFollow, DuplicateEdge, EdgeNotFound, StorageError
from ..models import User
from ..utils.pagination import check_page
from ..schemas import (
    FollowCreate,
    FollowRead,
    FollowSaveResponse,
    FollowingEntry,
    FollowerEntry,
    FollowingListResponse,
    FollowerListResponse,
    PublicUser,
)

router = APIRouter(prefix="/api/follow", tags=["follow"])
logger = logging.getLogger(__name__)


def get_follow_store(db: Session = Depends(get_db)) -> FollowStore:
    return FollowStore(db)


def get_follow_service(store: FollowStore = Depends(get_follow_store)) -> FollowService:
    return FollowService(store)


@router.post("/save", response_model=FollowSaveResponse)
def save(
    payload: FollowCreate,
    user: User = Depends(get_current_user),
    store: FollowStore = Depends(get_follow_store),
    db: Session = Depends(get_db),
):
    if not db.query(User).filter(User.id == payload.followed).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="El usuario que quieres seguir no existe")

    try:
        follow = store.create(user.id, payload.followed)
    except SelfFollow:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No puedes seguirte a ti mismo")
    except DuplicateEdge:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya sigues a este usuario")
    except StorageError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="No se ha podido seguir al usuario")

    logger.info("FOLLOW follower_id=%s followed_id=%s", user.id, payload.followed)
    return FollowSaveResponse(
        identity=PublicUser.model_validate(user),
        follow=FollowRead.model_validate(follow),
    )


@router.delete("/unfollow/{followed_id}")
def unfollow(
    followed_id: int,
    user: User = Depends(get_current_user),
    store: FollowStore = Depends(get_follow_store),
):
    try:
        store.delete(user.id, followed_id)
    except EdgeNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No has dejado de seguir a nadie")
    except StorageError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="No se ha podido dejar de seguir al usuario")

    logger.info("UNFOLLOW follower_id=%s followed_id=%s", user.id, followed_id)
    return {"status": "success", "message": "Follow eliminado correctamente"}


@router.get("/following", response_model=FollowingListResponse)
@router.get("/following/{user_id}", response_model=FollowingListResponse)
@router.get("/following/{user_id}/{page}", response_model=FollowingListResponse)
def following(
    user_id: Optional[int] = None,
    page: int = 1,
    user: User = Depends(get_current_user),
    store: FollowStore = Depends(get_follow_store),
    service: FollowService = Depends(get_follow_service),
    settings: Settings = Depends(get_settings),
):
    """
    Users that ``user_id`` (default: the caller) is following.
    """
    check_page(page)
    target_id = user_id if user_id is not None else user.id
    try:
        result = store.page_by_follower(target_id, page, settings.FOLLOW_PAGE_SIZE)
    except StorageError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al obtener el listado de seguidos")

    relationships = service.resolve_relationships(user.id)
    return FollowingListResponse(
        message="Listado de usuarios que estoy siguiendo",
        follows=[FollowingEntry.model_validate(f) for f in result.items],
        total=result.total,
        pages=result.pages,
        user_following=relationships.get("following", []),
        user_follow_me=relationships.get("followers", []),
    )


@router.get("/followers", response_model=FollowerListResponse)
@router.get("/followers/{user_id}", response_model=FollowerListResponse)
@router.get("/followers/{user_id}/{page}", response_model=FollowerListResponse)
def followers(
    user_id: Optional[int] = None,
    page: int = 1,
    user: User = Depends(get_current_user),
    store: FollowStore = Depends(get_follow_store),
    service: FollowService = Depends(get_follow_service),
    settings: Settings = Depends(get_settings),
):
    """
    Users following ``user_id`` (default: the caller).
    """
    check_page(page)
    target_id = user_id if user_id is not None else user.id
    try:
        result = store.page_by_followed(target_id, page, settings.FOLLOW_PAGE_SIZE)
    except StorageError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al obtener el listado de seguidores")

    relationships = service.resolve_relationships(user.id)
    return FollowerListResponse(
        message="Listado de usuarios que me siguen",
        follows=[FollowerEntry.model_validate(f) for f in result.items],
        total=result.total,
        pages=result.pages,
        user_following=relationships.get("following", []),
        user_follow_me=relationships.get("followers", []),
    )
