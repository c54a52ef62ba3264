"""
API Dependencies
Common dependencies for API endpoints (database session, authentication, roles, pagination)
"""

import uuid
from dataclasses import dataclass

from fastapi import HTTPException, Query, status

from app.config import settings
from app.core.security import (  # noqa: F401
    Role,
    get_current_user,
    require_candidate,
    require_employer,
    require_role,
)
from app.db.session import get_db  # noqa: F401


@dataclass
class PageParams:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def get_page_params(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        alias="pageSize",
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    ),
) -> PageParams:
    """Pagination query parameters (``page``, ``pageSize``)."""
    return PageParams(page=page, page_size=page_size)


def parse_id(value: str, detail: str) -> uuid.UUID:
    """Parse a path id; malformed ids are reported as not found."""
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
