"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the sweep engine.

Key Components:
---------------
- HashAlgorithm: Incremental digest factory (SHA-256, xxHash...).
- Hasher: Computes front-chunk and whole-file digests of a path.
- FileScanner: Walks a root and returns FileRecords.
- GroupingStage: One refinement step of the duplicate pipeline.
"""

from typing import Protocol, List, Optional, Callable
from filesweep.core.models import FileRecord

StoppedFlag = Optional[Callable[[], bool]]
ProgressCallback = Optional[Callable[[str, int, Optional[int]], None]]


class Digest(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for digest algorithms.

    Allows plugging in different hashing functions without affecting
    the rest of the grouping logic.
    """
    name: str

    def new(self) -> Digest:
        """Returns a fresh incremental digest object."""
        ...


class Hasher(Protocol):
    """Interface for hashing files."""
    def compute_front_hash(self, path: str, chunk_size: int) -> bytes: ...
    def compute_full_hash(self, path: str, stopped_flag: StoppedFlag = None) -> bytes: ...


class FileScanner(Protocol):
    def scan(
        self,
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[FileRecord]:
        """
        Scan files from the configured directory.

        Raises:
            ScanError: if the root or any entry is inaccessible.
        """
        ...


class GroupingStage(Protocol):
    """
    A stage takes candidate groups (lists of records sharing every key computed so far)
    and returns refined candidate groups, each with 2+ records.
    """
    name: str

    def process(
        self,
        groups: List[List[FileRecord]],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[List[FileRecord]]:
        ...
