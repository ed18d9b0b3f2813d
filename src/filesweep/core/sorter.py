"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure ordering logic for presentation: zero dependencies outside core.
The duplicate display list is sorted as a whole, never group by group.
"""
from typing import List, Sequence

from filesweep.core.models import DuplicateGroup, DuplicateRow, DuplicateSortOrder, LargeFileEntry


class Sorter:
    """
    Sorting rules:
    - PATH: lexicographic path
    - SIZE: ascending size, path breaks ties
    - Large files: descending size, path breaks ties
    """

    @staticmethod
    def flatten(groups: Sequence[DuplicateGroup]) -> List[DuplicateRow]:
        """One row per group member, in group order."""
        return [
            DuplicateRow(path=path, size=group.size, group_index=index, digest_hex=group.digest_hex)
            for index, group in enumerate(groups)
            for path in group.members
        ]

    @staticmethod
    def sort_rows(rows: Sequence[DuplicateRow], sort_order: DuplicateSortOrder = None) -> List[DuplicateRow]:
        if sort_order is None:
            sort_order = DuplicateSortOrder.PATH

        if sort_order == DuplicateSortOrder.SIZE:
            return sorted(rows, key=lambda r: (r.size, r.path))
        return sorted(rows, key=lambda r: (r.path, r.size))

    @staticmethod
    def display_rows(groups: Sequence[DuplicateGroup], sort_order: DuplicateSortOrder = None) -> List[DuplicateRow]:
        return Sorter.sort_rows(Sorter.flatten(groups), sort_order)

    @staticmethod
    def rank_by_size(entries: Sequence[LargeFileEntry]) -> List[LargeFileEntry]:
        return sorted(entries, key=lambda e: (-e.size, e.path))
