"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Path, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.config import Settings, get_settings
from rolegate.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    MAX_RECORD_ID,
)
from rolegate.core.database import get_db


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Type alias for the cached settings instance
AppSettings = Annotated[Settings, Depends(get_settings)]

# Primary keys addressed by path and referenced from request bodies
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]
RecordRef = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]


class PageParams(BaseModel):
    """Pagination query parameters shared by collection endpoints."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def get_page_params(
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = DEFAULT_PAGE,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> PageParams:
    return PageParams(page=page, page_size=page_size)


Pagination = Annotated[PageParams, Depends(get_page_params)]
