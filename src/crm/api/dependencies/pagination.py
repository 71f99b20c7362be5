"""Page/limit query parameters."""

from typing import Annotated

from fastapi import Depends, Query

from src.crm.schemas.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PageParams


def get_page_params(
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[
        int, Query(ge=1, le=MAX_PAGE_SIZE, description="Number of items per page")
    ] = DEFAULT_PAGE_SIZE,
) -> PageParams:
    return PageParams(page=page, limit=limit)


Pagination = Annotated[PageParams, Depends(get_page_params)]
