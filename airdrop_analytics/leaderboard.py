"""Leaderboard views over the ranked allocation list.

Search, amount-range filtering and pagination for tabular display. The
ranked list itself is never modified; each entry keeps its rank in the
full leaderboard.
"""

import math

from pydantic import BaseModel, Field

from .core.exceptions import ValidationError
from .core.models import AllocationRecord
from .core.types import AmountRange

DEFAULT_PAGE_SIZE = 50


class RankedEntry(BaseModel):
    """A leaderboard row."""

    rank: int  # 1-based position in the full ranked list
    address: str
    amount: int

    model_config = {"frozen": True}


class LeaderboardPage(BaseModel):
    """One page of leaderboard rows."""

    entries: list[RankedEntry] = Field(default_factory=list)
    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    total_items: int = 0
    total_pages: int = 0

    model_config = {"frozen": True}

    @property
    def start_index(self) -> int:
        """0-based index of the first entry within the filtered list."""
        return (self.page - 1) * self.per_page

    @property
    def end_index(self) -> int:
        """Exclusive end index within the filtered list."""
        return min(self.start_index + self.per_page, self.total_items)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def parse_amount_range(value: str | AmountRange) -> AmountRange:
    """Resolve a range key such as ``"5k-10k"``."""
    if isinstance(value, AmountRange):
        return value
    try:
        return AmountRange(value.strip().lower())
    except ValueError:
        valid = ", ".join(r.value for r in AmountRange)
        raise ValidationError("amount_range", value, f"expected one of: {valid}")


def filter_allocations(
    ranked: list[AllocationRecord],
    search_term: str = "",
    amount_range: AmountRange | str = AmountRange.ALL,
) -> list[RankedEntry]:
    """
    Filter the ranked list by address substring and amount range.

    Ranks are not renumbered after filtering: each row keeps its position in
    the full leaderboard rather than its position within the filtered list,
    so a filtered view can start at rank 5.

    Args:
        ranked: Allocations sorted by amount, descending
        search_term: Case-insensitive substring of the address
        amount_range: Range key or AmountRange

    Returns:
        Matching rows, in leaderboard order, with their overall rank
    """
    amount_range = parse_amount_range(amount_range)
    needle = search_term.strip().lower()

    return [
        RankedEntry(rank=rank, address=record.address, amount=record.amount)
        for rank, record in enumerate(ranked, start=1)
        if (not needle or needle in record.address) and amount_range.contains(record.amount)
    ]


def paginate(
    entries: list[RankedEntry],
    page: int = 1,
    per_page: int = DEFAULT_PAGE_SIZE,
) -> LeaderboardPage:
    """
    Slice one page out of a list of leaderboard rows.

    A page past the end gives an empty page rather than an error.

    Raises:
        ValidationError: If page or per_page is below 1
    """
    if page < 1:
        raise ValidationError("page", str(page), "must be at least 1")
    if per_page < 1:
        raise ValidationError("per_page", str(per_page), "must be at least 1")

    total_items = len(entries)
    start = (page - 1) * per_page

    return LeaderboardPage(
        entries=entries[start:start + per_page],
        page=page,
        per_page=per_page,
        total_items=total_items,
        total_pages=math.ceil(total_items / per_page),
    )


def page_window(current: int, total: int, size: int = 5) -> list[int]:
    """
    Page numbers to show around the current page.

    The window is centered on the current page where possible and shifted
    to stay within ``1..total``.

    Example:
        ```python
        page_window(1, 20)   # [1, 2, 3, 4, 5]
        page_window(10, 20)  # [8, 9, 10, 11, 12]
        page_window(20, 20)  # [16, 17, 18, 19, 20]
        ```
    """
    if total <= 0:
        return []
    if total <= size:
        return list(range(1, total + 1))

    half = size // 2
    start = min(max(current - half, 1), total - size + 1)
    return list(range(start, start + size))


def shorten_address(address: str, head: int = 10, tail: int = 8) -> str:
    """Abbreviate a long address as ``head...tail``."""
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}...{address[-tail:]}"
