"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

errors.py
Exception hierarchy of the sweep engine.

ScanError is terminal for a request, HashError is absorbed by the grouper,
DeleteError/RenameError are collected per item inside a BatchResult.
"""
from typing import Optional


class FileSweepError(RuntimeError):
    """Base class for all engine errors."""


class ScanError(FileSweepError):
    """Directory walk aborted: root missing or an entry was inaccessible."""

    def __init__(self, root: str, reason: str, path: Optional[str] = None):
        self.root = root
        self.path = path or root
        self.reason = reason
        super().__init__(f"Scan of {root} failed at {self.path}: {reason}")


class HashError(FileSweepError):
    """File could not be hashed (empty or unreadable)."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot hash {path}: {reason}")


class DeleteError(FileSweepError):
    """A single path of a delete batch failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")

    def __eq__(self, other):
        if not isinstance(other, DeleteError):
            return NotImplemented
        return type(self) is type(other) and (self.path, self.reason) == (other.path, other.reason)

    def __hash__(self):
        return hash((type(self).__name__, self.path, self.reason))

    def __repr__(self):
        return f"<{type(self).__name__} path={self.path!r} reason={self.reason!r}>"


class RenameError(DeleteError):
    """A single path of a rename batch failed (includes destination collisions)."""


class OperationCancelled(FileSweepError):
    """The caller's stop flag was raised while the operation was running."""
