"""
Pagination and search helpers shared by every list operation.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.orm import Query

T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def search_filter(columns: Sequence[Any], term: Optional[str]):
    """
    Case-insensitive substring match of `term` against any of `columns`.

    Returns None when there is nothing to filter on. `%` and `_` in the term
    are matched literally.
    """
    if not term or not term.strip():
        return None
    needle = term.strip().lower()
    return or_(*[func.lower(column).contains(needle, autoescape=True) for column in columns])


def paginate(query: Query, page: int, limit: int) -> PageResult:
    """
    Apply offset/limit to an already filtered and ordered query.

    Args:
        query: SQLAlchemy query
        page: 1-based page number
        limit: Page size

    Returns:
        PageResult with the page items and the unpaginated total
    """
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return PageResult(items=items, total=total, page=page, limit=limit)
