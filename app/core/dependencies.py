# app/core/dependencies.py
"""Shared FastAPI dependencies."""

import logging
from typing import Optional

from fastapi import Query

from app.shared.pagination import PaginationParams

logger = logging.getLogger(__name__)


async def get_pagination(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Items per page (1-100)"),
) -> PaginationParams:
    """Read pagination parameters leniently.

    Values arrive as raw strings so that a malformed ``page`` or ``limit``
    falls back to its default instead of failing the request.

    Returns:
        PaginationParams: clamped page and limit
    """
    return PaginationParams(page=page, limit=limit)
