"""
Pagination of ranked journey lists.
"""

import math
from typing import Sequence

from ..models.journey import JourneyModel, JourneyPage

MAX_PAGE_SIZE = 1000


def paginate(journeys: Sequence[JourneyModel], page: int, page_size: int) -> JourneyPage:
    """
    Slice one page out of a ranked journey list.

    Pages past the last one come back empty with the same metadata.

    Args:
        journeys: Fully ranked journeys
        page: One-based page number (>= 1)
        page_size: Journeys per page (1 to MAX_PAGE_SIZE)

    Raises:
        ValueError: If page or page_size is out of range
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

    total_count = len(journeys)
    start = (page - 1) * page_size
    return JourneyPage(
        items=tuple(journeys[start:start + page_size]),
        total_count=total_count,
        current_page=page,
        page_size=page_size,
        total_pages=math.ceil(total_count / page_size),
    )


def clamp_page(page: int, page_size: int, max_page_size: int = MAX_PAGE_SIZE) -> tuple:
    """Clamp page and page size to their nearest valid values."""
    max_page_size = min(max(max_page_size, 1), MAX_PAGE_SIZE)
    return max(page, 1), min(max(page_size, 1), max_page_size)
