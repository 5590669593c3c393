from __future__ import annotations

from typing import List

from app.records.models import ELLIPSIS, PAGE_SIZE, PageMarker, PaginationView
from app.records.utils import total_pages

MAX_VISIBLE = 7


def generate_page_numbers(current: int, total: int) -> List[PageMarker]:
    """
    Compact page index for the pagination bar.

    Up to MAX_VISIBLE pages are listed in full. Beyond that the first and last
    pages are anchored and ELLIPSIS fills the gaps around a small window:

    - near the start:  1 2 3 4 5 … N
    - near the end:    1 … N-4 N-3 N-2 N-1 N
    - in the middle:   1 … c-1 c c+1 … N

    A single page (or none) needs no bar at all.
    """
    if total <= 1:
        return []
    if total <= MAX_VISIBLE:
        return list(range(1, total + 1))
    if current <= 4:
        return [1, 2, 3, 4, 5, ELLIPSIS, total]
    if current >= total - 3:
        return [1, ELLIPSIS, total - 4, total - 3, total - 2, total - 1, total]
    return [1, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total]


def pagination_info(current: int, total_count: int, page_size: int = PAGE_SIZE, *, paged: bool = True) -> str:
    if total_count <= 0:
        return "No results"
    if not paged:
        return f"Showing 1-{total_count} of {total_count} incidents"
    start = (current - 1) * page_size + 1
    end = min(current * page_size, total_count)
    return f"Showing {start}-{end} of {total_count} incidents"


def clamp_page(page: int, total_count: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, page), max(1, total_pages(total_count, page_size)))


def build_pagination(current: int, total_count: int, page_size: int = PAGE_SIZE, *, paged: bool = True) -> PaginationView:
    if not paged:
        # Incident-number searches come back as one unpaged result set.
        return PaginationView(
            current_page=1,
            total_pages=1 if total_count > 0 else 0,
            total_count=total_count,
            page_size=page_size,
            page_numbers=[],
            prev_enabled=False,
            next_enabled=False,
            info=pagination_info(1, total_count, page_size, paged=False),
        )

    pages = total_pages(total_count, page_size)
    return PaginationView(
        current_page=current,
        total_pages=pages,
        total_count=total_count,
        page_size=page_size,
        page_numbers=generate_page_numbers(current, pages),
        prev_enabled=current > 1,
        next_enabled=current < pages,
        info=pagination_info(current, total_count, page_size),
    )
