"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/pagination.py
Fixed-page-size view over an ordered collection.

The current page is clamped to [0, total_pages - 1] after every mutation,
an empty collection still has one (empty) page, and page contents are sliced
fresh on every call.
"""
import math
from typing import Callable, Generic, Iterable, List, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20


def total_pages(n: int, page_size: int) -> int:
    """max(1, ceil(n / page_size))"""
    if page_size <= 0:
        raise ValueError("Page size must be positive")
    if n < 0:
        raise ValueError("Item count cannot be negative")
    return max(1, math.ceil(n / page_size))


class PaginatedResultSet(Generic[T]):
    """
    Read-only paging over a list of results with clamped navigation.
    next()/prev() at a boundary are no-ops, not errors.
    """

    def __init__(self, items: Iterable[T] = (), page_size: int = DEFAULT_PAGE_SIZE, page: int = 0):
        if page_size <= 0:
            raise ValueError("Page size must be positive")
        self._items: List[T] = list(items)
        self._page_size = page_size
        self._page = 0
        self.go_to(page)

    # ---- sizing ----
    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_items(self) -> int:
        return len(self._items)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self._items), self._page_size)

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def offset(self) -> int:
        return self._page * self._page_size

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def has_next(self) -> bool:
        return self._page < self.total_pages - 1

    @property
    def has_prev(self) -> bool:
        return self._page > 0

    def __len__(self) -> int:
        return len(self._items)

    # ---- navigation ----
    def clamp(self, page: int) -> int:
        return min(max(page, 0), self.total_pages - 1)

    def go_to(self, page: int) -> int:
        self._page = self.clamp(page)
        return self._page

    def next(self) -> int:
        return self.go_to(self._page + 1)

    def prev(self) -> int:
        return self.go_to(self._page - 1)

    def first(self) -> int:
        return self.go_to(0)

    def last(self) -> int:
        return self.go_to(self.total_pages - 1)

    # ---- content ----
    def page_items(self) -> List[T]:
        start = self.offset
        return self._items[start:start + self._page_size]

    def items(self) -> List[T]:
        return list(self._items)

    def page_label(self) -> str:
        return f"Page {self._page + 1} of {self.total_pages}"

    # ---- mutation ----
    def replace(self, items: Sequence[T]) -> None:
        """Swap the underlying collection and keep the view inside it."""
        self._items = list(items)
        self.go_to(self._page)

    def remove_where(self, predicate: Callable[[T], bool]) -> int:
        """Drop matching items, re-clamp, return how many were removed."""
        before = len(self._items)
        self._items = [item for item in self._items if not predicate(item)]
        self.go_to(self._page)
        return before - len(self._items)
