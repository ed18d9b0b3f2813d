"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/results.py
Per-request result objects returned by the engine.

Each result owns its collection and a PaginatedResultSet over the display
order. Nothing here outlives the request that produced it.
"""
from dataclasses import dataclass, field
from typing import Iterable, List

from filesweep.core.models import (
    DuplicateGroup, DuplicateRow, DuplicateSortOrder, LargeFileEntry, ScanStats
)
from filesweep.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResultSet
from filesweep.core.sorter import Sorter
from filesweep.services.duplicate_service import DuplicateService


@dataclass
class DuplicateScanResult:
    root: str
    groups: List[DuplicateGroup]
    stats: ScanStats = field(default_factory=ScanStats)
    sort_order: DuplicateSortOrder = DuplicateSortOrder.PATH
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.pages: PaginatedResultSet[DuplicateRow] = PaginatedResultSet(
            self.rows(), page_size=self.page_size
        )

    def rows(self) -> List[DuplicateRow]:
        return Sorter.display_rows(self.groups, self.sort_order)

    def resort(self, sort_order: DuplicateSortOrder) -> None:
        self.sort_order = DuplicateSortOrder(sort_order)
        self.pages.replace(self.rows())

    @property
    def total_files(self) -> int:
        return sum(g.count for g in self.groups)

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)

    def discard(self, paths: Iterable[str]) -> int:
        """
        Forget paths that were removed: shrink the groups (dropping those left
        with one member) and keep the current page inside the new bounds.
        Returns how many display rows disappeared.
        """
        before = len(self.pages)
        self.groups = DuplicateService.remove_paths_from_groups(self.groups, paths)
        self.pages.replace(self.rows())
        return before - len(self.pages)


@dataclass
class LargeFileResult:
    roots: List[str]
    entries: List[LargeFileEntry]
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.pages: PaginatedResultSet[LargeFileEntry] = PaginatedResultSet(
            self.entries, page_size=self.page_size
        )

    @property
    def total_bytes(self) -> int:
        return sum(e.size for e in self.entries)

    def discard(self, paths: Iterable[str]) -> int:
        removed = set(paths)
        self.entries = DuplicateService.remove_paths_from_entries(self.entries, removed)
        return self.pages.remove_where(lambda e: e.path in removed)
