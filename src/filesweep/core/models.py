"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, duplicate grouping, large-file ranking and deletion.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from filesweep.errors import DeleteError

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class DuplicateSortOrder(Enum):
    """
    Ordering of the flattened duplicate display list.
    """
    PATH = "path"
    SIZE = "size"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            DuplicateSortOrder.PATH: "Path",
            DuplicateSortOrder.SIZE: "Size (smallest first)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class SweepFeature(str, Enum):
    """Method tags written to the audit log: which feature issued a removal."""
    DUPLICATES = "duplicates"
    LARGE_FILES = "large-files"
    RENAME = "rename"
    MANUAL = "manual"


class HashAlgorithmName(str, Enum):
    SHA256 = "sha256"
    XXH128 = "xxh128"


class Stage(str, Enum):
    SCAN = "Scanning"
    SIZE = "Size grouping"
    FRONT = "Front-chunk Hash"
    FULL = "Full Hash"
    RANK = "Ranking"
    DELETE = "Deleting"
    RENAME = "Renaming"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """A regular file found by a scan. Not persisted."""
    path: str
    size: int  # in bytes

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.path)[1].lower()

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class ContentKey:
    """
    Identity of file content. Two files are duplicates iff their keys are equal.
    Size is part of the key so a weak digest can never merge different-size files.
    """
    digest: bytes
    size: int

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Field 'digest' must be bytes")
        if self.size < 0:
            raise ValueError("Field 'size' cannot be negative")

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()


@dataclass
class DuplicateGroup:
    """
    Paths sharing one ContentKey. Always holds at least two members, in scan order.
    """
    key: ContentKey
    members: List[str]

    def __post_init__(self):
        if len(self.members) < 2:
            raise ValueError("A duplicate group needs at least two members")

    @property
    def size(self) -> int:
        return self.key.size

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def wasted_bytes(self) -> int:
        """Space freed by keeping only one member."""
        return self.size * (self.count - 1)

    @property
    def digest_hex(self) -> str:
        return self.key.digest_hex

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={self.count}>"


@dataclass(frozen=True)
class DuplicateRow:
    """One member of a duplicate group, flattened for display."""
    path: str
    size: int
    group_index: int
    digest_hex: str


@dataclass(frozen=True)
class LargeFileEntry:
    path: str
    size: int


@dataclass(frozen=True)
class DeletionRecord:
    """One successful removal. Never mutated once written."""
    timestamp: float
    path: str
    method: str


@dataclass
class BatchResult:
    """
    Outcome of a best-effort delete/rename batch.
    Successes and per-path failures are both reported; one never hides the other.
    """
    success_count: int = 0
    errors: List[DeleteError] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)
    renamed: Dict[str, str] = field(default_factory=dict)  # old path -> new path

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_success(self, path: str, new_path: Optional[str] = None) -> None:
        self.success_count += 1
        self.succeeded.append(path)
        if new_path is not None:
            self.renamed[path] = new_path

    def add_error(self, error: DeleteError) -> None:
        self.errors.append(error)

    def error_pairs(self) -> List[tuple]:
        """Errors as (path, reason) tuples."""
        return [(e.path, e.reason) for e in self.errors]


class ScanStats:
    """
    Statistics collected during one request.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.files_skipped: int = 0
        self.groups_found: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        self._notify(stage_name, self.stage_stats[stage_name])

    def notify_stage_start(self, stage_name: str):
        """Notifies listeners that a new stage has started."""
        self._notify(stage_name, {"status": "started"})

    def _notify(self, stage_name: str, payload: Dict) -> None:
        for listener in self._listeners:
            try:
                listener(stage_name, payload)
            except Exception:
                logger.exception("Error in stats event handler")

    def summary(self) -> str:
        lines = [
            "Sweep Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files scanned: {self.files_scanned}, skipped (unhashable): {self.files_skipped}",
            "Stage: GROUPS / FILES / TIME",
        ]
        for stage, data in self.stage_stats.items():
            lines.append(f"{stage}: {data['groups']} / {data['files']} / {data['time']:.3f}s")
        return "\n".join(lines)


"""
DTO for sweep parameters with built-in validation.
Interface-agnostic: used by both the Qt worker and the CLI.
"""
from filesweep.core.pagination import DEFAULT_PAGE_SIZE  # noqa: E402
from filesweep.utils.convert_utils import ConvertUtils  # noqa: E402


def normalize_extensions(extensions: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize an extension filter: lowercase, leading dot, no blanks.
    Accepts a comma-separated string or an iterable of strings.
    """
    if not extensions:
        return []
    if isinstance(extensions, str):
        extensions = extensions.split(",")

    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if ext and not ext.startswith('.'):
            ext = f".{ext}"
        if ext and ext not in normalized:
            normalized.append(ext)
    return normalized


@dataclass
class SweepParams:
    """Parameters for scan/rank/delete operations with validation."""
    roots: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)
    excluded_dirs: List[str] = field(default_factory=list)
    sort_order: DuplicateSortOrder = DuplicateSortOrder.PATH
    page_size: int = DEFAULT_PAGE_SIZE
    hash_algorithm: HashAlgorithmName = HashAlgorithmName.SHA256
    workers: int = 4
    use_trash: bool = True
    skip_inaccessible: bool = False
    min_size_bytes: int = 0
    limit: Optional[int] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if self.page_size <= 0:
            raise ValueError("Page size must be positive")

        if self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.limit is not None and self.limit <= 0:
            raise ValueError("Limit must be positive")

        if any(not root for root in self.roots):
            raise ValueError("Root directory cannot be empty")

        self.sort_order = DuplicateSortOrder(self.sort_order)
        self.hash_algorithm = HashAlgorithmName(self.hash_algorithm)
        self.extensions = normalize_extensions(self.extensions)

    @staticmethod
    def from_human_readable(
            roots: List[str],
            extensions_str: str = "",
            min_size_str: str = "0",
            excluded_dirs: Optional[List[str]] = None,
            sort_order: Union[str, DuplicateSortOrder] = DuplicateSortOrder.PATH,
            page_size: int = DEFAULT_PAGE_SIZE,
            **kwargs
    ) -> 'SweepParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing or GUI input conversion.
        """
        return SweepParams(
            roots=list(roots),
            extensions=normalize_extensions(extensions_str),
            excluded_dirs=excluded_dirs or [],
            sort_order=DuplicateSortOrder(sort_order),
            page_size=page_size,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            **kwargs
        )
