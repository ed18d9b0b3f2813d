"""
Unified engine for scanning, duplicate grouping, large-file ranking and safe deletion.
This is the SINGLE source of truth for business logic: used by both the Qt worker and the CLI.
No Qt/PySide6 dependencies: pure Python.

Usage:
    engine = SweepEngine(SweepParams(workers=4))
    result = engine.scan_duplicates("/data", extensions=".jpg,.png")
    for row in result.pages.page_items():
        ...
    outcome = engine.delete([row.path], SweepFeature.DUPLICATES)
    result.discard(outcome.succeeded)
    text = engine.export_audit_log()
"""
import logging
import time
from typing import Iterable, List, Optional, Sequence, Union

from filesweep.core.grouper import DuplicateGrouper
from filesweep.core.hasher import ContentHasher, get_algorithm
from filesweep.core.interfaces import ProgressCallback, StoppedFlag
from filesweep.core.models import (
    BatchResult, DeletionRecord, DuplicateGroup, FileRecord, LargeFileEntry,
    ScanStats, Stage, SweepFeature, SweepParams
)
from filesweep.core.ranker import LargeFileRanker
from filesweep.core.results import DuplicateScanResult, LargeFileResult
from filesweep.core.scanner import DirectoryScanner
from filesweep.services.audit_log import DeletionAuditLog
from filesweep.services.deleter import SafeDeleter

logger = logging.getLogger(__name__)


class SweepEngine:
    """
    Orchestrates scan → hash → group/rank → delete.

    The engine keeps no scan state between calls: every scan returns its own
    result object. The audit log is the only thing that survives across scans.
    """

    def __init__(self, params: Optional[SweepParams] = None, audit_log: Optional[DeletionAuditLog] = None):
        self.params = params or SweepParams()
        self._audit_log = audit_log if audit_log is not None else DeletionAuditLog()
        self._deleter = SafeDeleter(self._audit_log, use_trash=self.params.use_trash)
        self._hasher = ContentHasher(get_algorithm(self.params.hash_algorithm))

    @property
    def audit_log(self) -> DeletionAuditLog:
        return self._audit_log

    # =============================
    # Scanning and grouping
    # =============================
    def scan(
        self,
        root: str,
        extensions: Union[str, Iterable[str], None] = None,
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[FileRecord]:
        """
        Raises:
            ScanError: root or an entry below it is inaccessible (nothing partial is returned)
            OperationCancelled: stopped_flag raised
        """
        scanner = DirectoryScanner(
            root,
            extensions=self.params.extensions if extensions is None else extensions,
            excluded_dirs=self.params.excluded_dirs,
            skip_inaccessible=self.params.skip_inaccessible
        )
        return scanner.scan(stopped_flag=stopped_flag, progress_callback=progress_callback)

    def find_duplicates(
        self,
        records: Sequence[FileRecord],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        grouper = DuplicateGrouper(self._hasher, workers=self.params.workers)
        return grouper.find_duplicates(
            list(records),
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
            stats=stats
        )

    def scan_duplicates(
        self,
        root: str,
        extensions: Union[str, Iterable[str], None] = None,
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> DuplicateScanResult:
        """scan() + find_duplicates() wrapped in a paginated result session."""
        stats = ScanStats()
        start_time = time.time()

        records = self.scan(root, extensions, stopped_flag=stopped_flag, progress_callback=progress_callback)
        stats.files_scanned = len(records)
        stats.update_stage(Stage.SCAN.value, 0, len(records), time.time() - start_time)

        groups = self.find_duplicates(
            records, stopped_flag=stopped_flag, progress_callback=progress_callback, stats=stats
        )
        stats.total_time = time.time() - start_time

        return DuplicateScanResult(
            root=root,
            groups=groups,
            stats=stats,
            sort_order=self.params.sort_order,
            page_size=self.params.page_size
        )

    def rank_large_files(
        self,
        roots: Sequence[str],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[LargeFileEntry]:
        ranker = LargeFileRanker(
            min_size=self.params.min_size_bytes,
            limit=self.params.limit,
            excluded_dirs=self.params.excluded_dirs,
            skip_inaccessible=self.params.skip_inaccessible
        )
        return ranker.rank(roots, stopped_flag=stopped_flag, progress_callback=progress_callback)

    def scan_large_files(
        self,
        roots: Sequence[str],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> LargeFileResult:
        entries = self.rank_large_files(roots, stopped_flag=stopped_flag, progress_callback=progress_callback)
        return LargeFileResult(roots=list(roots), entries=entries, page_size=self.params.page_size)

    # =============================
    # Removal and audit trail
    # =============================
    def delete(
        self,
        paths: Iterable[str],
        method: Union[str, SweepFeature] = SweepFeature.MANUAL,
        progress_callback: ProgressCallback = None
    ) -> BatchResult:
        return self._deleter.delete(paths, method, progress_callback=progress_callback)

    def rename(
        self,
        paths: Iterable[str],
        prefix: str,
        feature: Union[str, SweepFeature, None] = None,
        progress_callback: ProgressCallback = None
    ) -> BatchResult:
        return self._deleter.rename(paths, prefix, feature, progress_callback=progress_callback)

    def audit_records(self) -> Sequence[DeletionRecord]:
        return self._audit_log.records()

    def export_audit_log(self) -> str:
        return self._audit_log.export()

    def write_audit_log(self, file_path: str, append: bool = True) -> int:
        return self._audit_log.write_to(file_path, append=append)

    def clear_audit_log(self) -> None:
        self._audit_log.clear()
