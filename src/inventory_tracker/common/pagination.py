"""
Pagination utilities shared by the list endpoints.

The helpers are parameter-only: they never touch the database. Services
compute the offset with `compute_skip`, run their own count and page
queries, then describe the page with `build_pagination`.
"""

import math
from typing import Any, Optional

from pydantic import BaseModel

from ..core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


def normalize_page(page: Optional[Any]) -> int:
    """Returns a usable 1-based page number, falling back to 1."""
    try:
        value = int(page)
    except (TypeError, ValueError):
        return 1
    return value if value >= 1 else 1


def normalize_page_size(page_size: Optional[Any]) -> int:
    """Returns a usable page size; zero, negative or junk input gives the default."""
    try:
        value = int(page_size)
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    if value < 1:
        return DEFAULT_PAGE_SIZE
    return min(value, MAX_PAGE_SIZE)


def compute_skip(page: int, page_size: int) -> int:
    return (normalize_page(page) - 1) * normalize_page_size(page_size)


def build_pagination(page: int, page_size: int, total: int) -> PaginationMeta:
    """
    Describes one page of a result set of `total` records.

    Args:
        page: Requested page number (1-based).
        page_size: Records per page.
        total: Number of records matching the query, before pagination.

    Returns:
        PaginationMeta with total_pages = ceil(total / page_size) and the
        next/previous page flags.
    """
    page = normalize_page(page)
    page_size = normalize_page_size(page_size)
    total = max(int(total), 0)
    total_pages = math.ceil(total / page_size)
    return PaginationMeta(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        items_per_page=page_size,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
