"""
Publication router: short posts owned by users.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..config import Settings
from ..db import get_db, get_settings
from ..models import Publication, User
from ..schemas import PublicationCreate, PublicationRead, PublicUser
from ..utils.pagination import paginate, check_page

router = APIRouter(prefix="/api/publication", tags=["publication"])
logger = logging.getLogger(__name__)


@router.post("/save")
def save(payload: PublicationCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    publication = Publication(user_id=user.id, text=payload.text, file=payload.file)
    db.add(publication)
    db.commit()
    db.refresh(publication)
    return {
        "status": "success",
        "message": "Publicación guardada",
        "publication": PublicationRead.model_validate(publication),
    }


@router.get("/detail/{publication_id}")
def detail(publication_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    publication = db.query(Publication).filter(Publication.id == publication_id).first()
    if not publication:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No existe la publicación")
    return {"status": "success", "publication": PublicationRead.model_validate(publication)}


@router.delete("/remove/{publication_id}")
def remove(publication_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = (
        db.query(Publication)
        .filter(Publication.id == publication_id, Publication.user_id == user.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No se ha eliminado la publicación")
    return {"status": "success", "message": "Publicación eliminada", "publication": publication_id}


@router.get("/user/{user_id}")
@router.get("/user/{user_id}/{page}")
def user_publications(
    user_id: int,
    page: int = 1,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    check_page(page)
    owner = db.query(User).filter(User.id == user_id).first()
    if not owner:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="El usuario no existe")

    query = (
        db.query(Publication)
        .filter(Publication.user_id == user_id)
        .order_by(Publication.created_at.desc(), Publication.id.desc())
    )
    result = paginate(query, page, settings.PUBLICATIONS_PAGE_SIZE)
    return {
        "status": "success",
        "message": "Publicaciones del perfil de un usuario",
        "user": PublicUser.model_validate(owner),
        "publications": [PublicationRead.model_validate(p) for p in result.items],
        "page": page,
        "total": result.total,
        "pages": result.pages,
    }
