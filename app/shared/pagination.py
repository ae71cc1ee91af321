"""Pagination utilities."""

import math
from typing import Any, Dict

from pydantic import BaseModel, field_validator
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select

from app.core.config import settings

DEFAULT_PAGE = 1


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class PaginationParams(BaseModel):
    """Pagination parameters.

    Out-of-range values are clamped rather than rejected: page below 1 becomes
    1, limit is held to ``[1, pagination_max_limit]``. Missing or non-numeric
    values fall back to the defaults.
    """

    page: int = DEFAULT_PAGE
    limit: int = settings.pagination_default_limit

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v: Any) -> int:
        page = _to_int(v)
        if page is None:
            return DEFAULT_PAGE
        return max(DEFAULT_PAGE, page)

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        limit = _to_int(v)
        if limit is None:
            return settings.pagination_default_limit
        return min(settings.pagination_max_limit, max(1, limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    """Pagination metadata returned alongside a page of results."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def build_pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    """Build pagination metadata for a page of ``limit`` items out of ``total``."""
    total_pages = math.ceil(total / limit) if limit else 0
    meta = PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    return meta.model_dump()


async def paginate(
    db: AsyncSession,
    query: Select,
    pagination: PaginationParams,
    order_by: Any = None,
) -> Dict[str, Any]:
    """
    Paginate a SQLAlchemy query.

    Args:
        db: Database session
        query: SQLAlchemy select query, already filtered
        pagination: Pagination parameters
        order_by: Optional ordering clause(s) applied to the page query

    Returns:
        Dictionary with ``data`` (the ORM objects of the page) and
        ``pagination`` metadata
    """

    # Get total count by creating a count query from the original query's subquery
    subquery = query.order_by(None).subquery()
    count_query = select(func.count()).select_from(subquery)
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    if order_by is not None:
        clauses = order_by if isinstance(order_by, (list, tuple)) else [order_by]
        query = query.order_by(*clauses)

    paginated_query = query.offset(pagination.offset).limit(pagination.limit)

    result = await db.execute(paginated_query)
    items = list(result.scalars().all())

    return {
        "data": items,
        "pagination": build_pagination_meta(pagination.page, pagination.limit, total),
    }
