"""
Core sweep engine: scanner, hasher, grouper, ranker and pagination.

This package contains the performance-critical foundation of filesweep:
- DirectoryScanner: deterministic recursive traversal with extension filter
- ContentHasher: streamed SHA-256 / xxHash digests
- DuplicateGrouper: size → front hash → full hash pipeline keyed by (digest, size)
- LargeFileRanker: multi-root ranking by descending size
- PaginatedResultSet: clamped fixed-size pages over any ordered result
- Models: FileRecord, ContentKey, DuplicateGroup and configuration objects

All components are pure Python with no GUI dependencies: suitable for CLI and server usage.
"""

from .models import (
    FileRecord, ContentKey, DuplicateGroup, DuplicateRow, LargeFileEntry, DeletionRecord,
    BatchResult, ScanStats, SweepParams, DuplicateSortOrder, SweepFeature, HashAlgorithmName, Stage)
from .pagination import PaginatedResultSet, total_pages
from .scanner import DirectoryScanner
from .hasher import ContentHasher, Sha256AlgorithmImpl, XXHashAlgorithmImpl, get_algorithm
from .grouper import DuplicateGrouper
from .ranker import LargeFileRanker
from .sorter import Sorter
from .results import DuplicateScanResult, LargeFileResult

__all__ = [
    "FileRecord",
    "ContentKey",
    "DuplicateGroup",
    "DuplicateRow",
    "LargeFileEntry",
    "DeletionRecord",
    "BatchResult",
    "ScanStats",
    "SweepParams",
    "DuplicateSortOrder",
    "SweepFeature",
    "HashAlgorithmName",
    "Stage",
    "PaginatedResultSet",
    "total_pages",
    "DirectoryScanner",
    "ContentHasher",
    "Sha256AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "get_algorithm",
    "DuplicateGrouper",
    "LargeFileRanker",
    "Sorter",
    "DuplicateScanResult",
    "LargeFileResult",
]
