"""
Offset pagination and shared filter helpers for list queries
"""
import math
from dataclasses import dataclass
from typing import Any, List

from sqlalchemy.orm import Query

LIKE_ESCAPE = "\\"


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def paginate(query: Query, page: int, limit: int, *order_by) -> Page:
    """
    Count the filtered query, then fetch one 1-indexed page of it.
    Ordering is applied after counting so the COUNT stays cheap.
    """
    total = query.order_by(None).count()
    items = (
        query.order_by(*order_by)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=items, total=total, page=page, limit=limit)


def contains_pattern(value: str) -> str:
    """ILIKE pattern matching value as a literal substring; use with escape=LIKE_ESCAPE"""
    for char in (LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, LIKE_ESCAPE + char)
    return f"%{value}%"
