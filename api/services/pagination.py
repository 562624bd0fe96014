"""
Pagination helpers: page/size → bounded, ordered slices plus page metadata.

Invalid page parameters are rejected, never clamped.
"""

import math
from dataclasses import dataclass

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from services.errors import ValidationFailed


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = settings.DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page < 0:
            raise ValidationFailed(f"page must be >= 0 (got {self.page})")
        if self.size <= 0:
            raise ValidationFailed(f"size must be > 0 (got {self.size})")
        if self.size > settings.MAX_PAGE_SIZE:
            raise ValidationFailed(f"size must be <= {settings.MAX_PAGE_SIZE} (got {self.size})")

    @property
    def offset(self) -> int:
        return self.page * self.size


def total_pages(total_elements: int, size: int) -> int:
    if total_elements <= 0:
        return 0
    return math.ceil(total_elements / size)


def page_payload(items: list, total_elements: int, request: PageRequest) -> dict:
    """Build the page response body shared by every paginated listing."""
    return {
        "items": items,
        "total_elements": total_elements,
        "total_pages": total_pages(total_elements, request.size),
        "current_page": request.page,
        "page_size": request.size,
    }


def empty_page(request: PageRequest) -> dict:
    return page_payload([], 0, request)


async def paginate(db: AsyncSession, query: Select, request: PageRequest) -> tuple[list, int]:
    """
    Run ``query`` for one page.

    The query must already carry its ORDER BY. Returns (items, total_elements).
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0
    if total == 0:
        return [], 0

    result = await db.execute(query.offset(request.offset).limit(request.size))
    return list(result.scalars().all()), total
