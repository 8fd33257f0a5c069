"""Client-side pagination over an already-fetched result list.

Each view configures its own page size; navigation wraps around in both
directions.
"""

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def page_count(total_items: int, page_size: int) -> int:
    """Number of pages for a result set; never less than one."""
    return max(1, math.ceil(total_items / page_size))


class Paginator:
    """Wraparound pagination state for one view.

    Example:
        paginator = Paginator(total_items=9, page_size=4)
        paginator.jump_to(2)
        paginator.next()  # wraps to page 0
    """

    def __init__(self, total_items: int = 0, page_size: int = 8, page: int = 0) -> None:
        """Initialize paginator.

        Args:
            total_items: Number of items in the result list.
            page_size: Items per page for this view.
            page: Starting zero-based page index.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.total_items = total_items
        self.page = page

    @property
    def page_count(self) -> int:
        return page_count(self.total_items, self.page_size)

    @property
    def has_navigation(self) -> bool:
        """Whether previous/next controls are worth rendering."""
        return self.page_count > 1

    def is_valid_page(self, page: int) -> bool:
        return 0 <= page < self.page_count

    def slice(self, items: Sequence[T], page: int | None = None) -> list[T]:
        """Return the items on a page (the current page by default)."""
        index = self.page if page is None else page
        start = index * self.page_size
        return list(items[start : start + self.page_size])

    def current_page(self, items: Sequence[T]) -> list[T]:
        return self.slice(items)

    def next(self) -> int:
        """Advance one page, wrapping to the first page after the last."""
        self.page = (self.page + 1) % self.page_count
        return self.page

    def previous(self) -> int:
        """Go back one page, wrapping to the last page before the first."""
        self.page = (self.page - 1 + self.page_count) % self.page_count
        return self.page

    def peek_next(self) -> int:
        return (self.page + 1) % self.page_count

    def peek_previous(self) -> int:
        return (self.page - 1 + self.page_count) % self.page_count

    def jump_to(self, page: int) -> int:
        """Set the page directly.

        Range checking is the caller's job; the UI only offers one dot per
        existing page.
        """
        self.page = page
        return self.page

    def reset(self, total_items: int) -> None:
        """Point the paginator at a new result set, back on the first page."""
        self.total_items = total_items
        self.page = 0
