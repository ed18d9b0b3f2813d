"""
filesweep: duplicate and oversized file finder with safe, audited removal.

Core features:
- Duplicate detection by (content digest, size): size → front-chunk hash → full SHA-256
- Ranking of the largest files across several roots
- Paginated result sessions with clamped navigation
- Best-effort batch deletion to system trash (via send2trash) or rename-with-prefix
- Append-only audit trail of every removal, exportable as tab-separated text
- CLI interface and an optional PySide6 background worker (install with [gui] extra)
"""
from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("filesweep")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from filesweep.engine import SweepEngine
from filesweep.core import (
    SweepParams, DuplicateSortOrder, SweepFeature, FileRecord, ContentKey, DuplicateGroup,
    LargeFileEntry, DeletionRecord, BatchResult, PaginatedResultSet
)
from filesweep.errors import (
    FileSweepError, ScanError, HashError, DeleteError, RenameError, OperationCancelled
)
from filesweep.services import DeletionAuditLog, SafeDeleter, FileService
from filesweep.utils.convert_utils import ConvertUtils

__all__ = [
    "SweepEngine",
    "SweepParams",
    "DuplicateSortOrder",
    "SweepFeature",
    "FileRecord",
    "ContentKey",
    "DuplicateGroup",
    "LargeFileEntry",
    "DeletionRecord",
    "BatchResult",
    "PaginatedResultSet",
    "FileSweepError",
    "ScanError",
    "HashError",
    "DeleteError",
    "RenameError",
    "OperationCancelled",
    "DeletionAuditLog",
    "SafeDeleter",
    "FileService",
    "ConvertUtils",
    "__version__",
]
