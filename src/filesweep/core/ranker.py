"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/ranker.py
Ranks files from one or more roots by descending size.
Files that vanish or become unreadable between scan and stat are dropped silently.
"""

import logging
import os
import time
from typing import Iterable, List, Optional

from filesweep.core.interfaces import ProgressCallback, StoppedFlag
from filesweep.core.models import LargeFileEntry, Stage
from filesweep.core.scanner import DirectoryScanner
from filesweep.core.sorter import Sorter
from filesweep.errors import OperationCancelled

logger = logging.getLogger(__name__)


class LargeFileRanker:
    """
    Attributes:
        min_size: files smaller than this are left out of the ranking
        limit: keep only the top N entries (None = all)
        excluded_dirs: passed through to every DirectoryScanner
        skip_inaccessible: scanner policy for unreadable entries
    """

    def __init__(
        self,
        min_size: int = 0,
        limit: Optional[int] = None,
        excluded_dirs: Optional[List[str]] = None,
        skip_inaccessible: bool = False
    ):
        self.min_size = min_size
        self.limit = limit
        self.excluded_dirs = excluded_dirs or []
        self.skip_inaccessible = skip_inaccessible

    def rank(
        self,
        roots: Iterable[str],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[LargeFileEntry]:
        """
        Raises:
            ScanError: a root (or an entry under it) is inaccessible
            OperationCancelled: stopped_flag raised
        """
        start_time = time.time()
        roots = list(roots)
        if not roots:
            raise ValueError("At least one root directory is required")

        paths = []
        for root in roots:
            scanner = DirectoryScanner(
                root,
                excluded_dirs=self.excluded_dirs,
                skip_inaccessible=self.skip_inaccessible
            )
            paths.extend(scanner.iter_paths(stopped_flag=stopped_flag))

        entries = []
        seen = set()
        total = len(paths)
        for processed, path in enumerate(paths, 1):
            if stopped_flag and stopped_flag():
                raise OperationCancelled("Large file ranking cancelled")

            entry = self._stat_entry(path, seen)
            if entry is not None and entry.size >= self.min_size:
                entries.append(entry)

            if progress_callback and (processed % 1000 == 0 or processed == total):
                progress_callback(Stage.RANK.value, processed, total)

        ranked = Sorter.rank_by_size(entries)
        if self.limit is not None:
            ranked = ranked[:self.limit]

        logger.info(f"Ranked {len(ranked)} of {total} files from {len(roots)} root(s) "
                    f"in {time.time() - start_time:.2f}s")
        return ranked

    @staticmethod
    def _stat_entry(path: str, seen: set) -> Optional[LargeFileEntry]:
        """Stat one survivor; None when it is gone, unreadable or already ranked via another root."""
        try:
            real = os.path.realpath(path)
            if real in seen:
                return None
            size = os.stat(path).st_size
        except OSError as e:
            logger.debug(f"Dropping {path} from ranking: {e}")
            return None

        seen.add(real)
        return LargeFileEntry(path=path, size=size)
