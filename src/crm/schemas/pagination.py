"""Pagination schemas for page/limit pagination."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int = Field(description="Total number of pages: ceil(total / limit)")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class PaginatedResponse(BaseModel, Generic[T]):
    """List envelope: `{success, data, pagination: {page, limit, total, pages}}`."""

    success: bool = True
    data: list[T]
    pagination: PaginationMeta


class PageParams(BaseModel):
    """Page and limit query parameters (1-based pages)."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
