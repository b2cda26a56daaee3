"""
Relation store for follow edges.

The store is the only writer of ``Follow`` rows. Every failure is raised as a
``FollowStoreError`` subclass so callers can map each outcome to its own
response.
"""
import logging
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .models import Follow
from .utils.pagination import Page, paginate

logger = logging.getLogger(__name__)


class FollowStoreError(Exception):
    """Base class for relation store failures."""


class SelfFollow(FollowStoreError):
    """An account tried to follow itself."""


class DuplicateEdge(FollowStoreError):
    """The (follower, followed) pair already exists."""


class EdgeNotFound(FollowStoreError):
    """No edge matched a delete."""


class StorageError(FollowStoreError):
    """The database could not complete the operation."""


def _is_duplicate_pair(error: IntegrityError) -> bool:
    # PostgreSQL names the constraint, SQLite lists the columns.
    message = str(error.orig)
    if "uq_follow" in message:
        return True
    return "UNIQUE" in message.upper() and "follower_id" in message and "followed_id" in message


class FollowStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, follower_id: int, followed_id: int) -> Follow:
        if follower_id == followed_id:
            raise SelfFollow(f"user {follower_id} cannot follow itself")

        edge = Follow(follower_id=follower_id, followed_id=followed_id)
        try:
            self.db.add(edge)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_duplicate_pair(e):
                raise DuplicateEdge(f"user {follower_id} already follows {followed_id}") from e
            logger.error("Rejected follow %s -> %s: %s", follower_id, followed_id, e.orig)
            raise StorageError(str(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to store follow %s -> %s: %s", follower_id, followed_id, e)
            raise StorageError(str(e)) from e

        self.db.refresh(edge)
        return edge

    def delete(self, follower_id: int, followed_id: int) -> int:
        try:
            deleted = (
                self.db.query(Follow)
                .filter(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete follow %s -> %s: %s", follower_id, followed_id, e)
            raise StorageError(str(e)) from e

        if not deleted:
            raise EdgeNotFound(f"user {follower_id} does not follow {followed_id}")
        return deleted

    def find(self, follower_id: int, followed_id: int) -> Optional[Follow]:
        try:
            return (
                self.db.query(Follow)
                .filter(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def query_by_follower(self, user_id: int) -> Iterator[Follow]:
        return self._iterate(Follow.follower_id == user_id)

    def query_by_followed(self, user_id: int) -> Iterator[Follow]:
        return self._iterate(Follow.followed_id == user_id)

    def _iterate(self, criterion) -> Iterator[Follow]:
        try:
            for edge in self.db.query(Follow).filter(criterion).order_by(Follow.id).yield_per(100):
                yield edge
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def count_by_follower(self, user_id: int) -> int:
        return self._count(Follow.follower_id == user_id)

    def count_by_followed(self, user_id: int) -> int:
        return self._count(Follow.followed_id == user_id)

    def _count(self, criterion) -> int:
        try:
            return self.db.query(Follow).filter(criterion).count()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def page_by_follower(self, user_id: int, page: int, per_page: int) -> Page:
        query = (
            self.db.query(Follow)
            .options(joinedload(Follow.follower), joinedload(Follow.followed))
            .filter(Follow.follower_id == user_id)
        )
        return self._page(query, page, per_page)

    def page_by_followed(self, user_id: int, page: int, per_page: int) -> Page:
        query = (
            self.db.query(Follow)
            .options(joinedload(Follow.follower))
            .filter(Follow.followed_id == user_id)
        )
        return self._page(query, page, per_page)

    def _page(self, query, page: int, per_page: int) -> Page:
        try:
            return paginate(query.order_by(Follow.created_at, Follow.id), page, per_page)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
