"""Shared presentation utilities for Showreel."""

import logging
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)

PAGE_WINDOW_SIZE = 5


def _round_half_up(value: Decimal, places: int = 0) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_views(count: int) -> str:
    """Format view count: 500, 2K, 2.5M.

    Thousands round to the nearest whole K (ties away from zero), millions
    keep one decimal. Rounding is half-up on the exact decimal value, so
    1500 -> "2K", 2_250_000 -> "2.3M" and 1_150_000 -> "1.2M". Binary float
    rounding would give "1.1M" for the last one.
    """
    count = int(count)
    if count >= 1_000_000:
        return f"{_round_half_up(Decimal(count) / 1_000_000, 1)}M"
    if count >= 1_000:
        return f"{_round_half_up(Decimal(count) / 1_000)}K"
    return str(count)


def page_window(current_page: int, total_pages: int, window_size: int = PAGE_WINDOW_SIZE) -> list[int]:
    """Page numbers to show as pagination buttons.

    Centered on the current page, shifted so the window stays full at
    either end: (1, 10) -> 1..5, (5, 10) -> 3..7, (8, 10) -> 6..10.
    """
    if total_pages <= 0:
        return []
    if total_pages <= window_size:
        return list(range(1, total_pages + 1))
    half = window_size // 2
    if current_page <= half + 1:
        start = 1
    elif current_page >= total_pages - half:
        start = total_pages - window_size + 1
    else:
        start = current_page - half
    return list(range(start, start + window_size))
