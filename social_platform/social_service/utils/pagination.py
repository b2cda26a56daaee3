"""
Offset pagination over SQLAlchemy queries.
"""
import math
from dataclasses import dataclass, field
from typing import Any, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Query


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 5

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0


def paginate(query: Query, page: int, per_page: int) -> Page:
    """
    Return one page of ``query``.

    Pages are 1-indexed. A page past the last one yields an empty ``items``
    list; ``total`` always counts every matching row.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if per_page < 1:
        raise ValueError("per_page must be >= 1")

    total = query.order_by(None).count()
    offset = (page - 1) * per_page
    if offset >= total:
        # Also keeps huge page numbers away from the database's 64-bit OFFSET.
        return Page(items=[], total=total, page=page, per_page=per_page)
    items = query.offset(offset).limit(per_page).all()
    return Page(items=items, total=total, page=page, per_page=per_page)


def check_page(page: int) -> None:
    """Reject page numbers below 1 coming from a path or query parameter."""
    if page < 1:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="La página debe ser mayor o igual que 1")
