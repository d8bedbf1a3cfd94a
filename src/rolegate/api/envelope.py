"""Response envelope shared by every endpoint.

Successful responses look like ``{"success": true, "message": ..., "data": ...}``;
collections put ``{items, page, page_size, total}`` in ``data``.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

from rolegate.api.dependencies import PageParams


T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class Page(BaseModel, Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total: int


def ok(message: str | None = None, data: T | None = None) -> Envelope[T]:
    return Envelope(success=True, message=message, data=data)


def fail(message: str) -> Envelope[None]:
    return Envelope(success=False, message=message)


def paginate(items: list[T], params: PageParams, total: int) -> Page[T]:
    """Wrap one page of ``items`` with the paging parameters that produced it."""
    return Page(items=items, page=params.page, page_size=params.page_size, total=total)
