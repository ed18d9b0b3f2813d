"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Recursive directory scanner.
Features:
- Deterministic traversal (names sorted at every level)
- Optional case-insensitive extension filter
- Fail-fast on inaccessible entries (optional skip-and-log policy)
- Cooperative cancellation between files
"""

import os
import sys
import time
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from filesweep.core.interfaces import FileScanner, ProgressCallback, StoppedFlag
from filesweep.core.models import FileRecord, Stage, normalize_extensions
from filesweep.errors import OperationCancelled, ScanError

logger = logging.getLogger(__name__)


class DirectoryScanner(FileScanner):
    """
    Walks a root directory and yields regular files that pass the extension filter.

    Attributes:
        root_dir: Root directory to scan
        extensions: Allowed extensions (e.g. [".txt", ".jpg"]); empty = all files
        excluded_dirs: Directories never descended into
        skip_inaccessible: Log and skip unreadable entries instead of raising ScanError
    """

    def __init__(
        self,
        root_dir: str,
        extensions: Union[str, Iterable[str], None] = None,
        excluded_dirs: Optional[List[str]] = None,
        skip_inaccessible: bool = False,
    ):
        self.root_dir = str(root_dir)
        self.extensions = normalize_extensions(extensions)
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.skip_inaccessible = skip_inaccessible

    def scan(self,
             stopped_flag: StoppedFlag = None,
             progress_callback: ProgressCallback = None) -> List[FileRecord]:
        """
        Returns the complete list of matching files.
        The list is built fully before returning: a ScanError never leaks a partial result.
        """
        logger.debug(f"Starting scan of {self.root_dir} (extensions={self.extensions})")
        start_time = time.time()

        records = []
        for path in self.iter_paths(stopped_flag=stopped_flag):
            size = self._stat_size(path)
            if size is None:
                continue
            records.append(FileRecord(path=path, size=size))
            if progress_callback and len(records) % 1000 == 0:
                progress_callback(Stage.SCAN.value, len(records), None)

        if progress_callback:
            progress_callback(Stage.SCAN.value, len(records), len(records))

        logger.debug(f"Scan of {self.root_dir} found {len(records)} files in {time.time() - start_time:.2f}s")
        return records

    def iter_paths(self, stopped_flag: StoppedFlag = None) -> Iterator[str]:
        """
        Generator of matching file paths in traversal order. Not restartable.
        """
        root_path = Path(self.root_dir)
        if not root_path.exists():
            raise ScanError(self.root_dir, "directory does not exist")
        if not root_path.is_dir():
            raise ScanError(self.root_dir, "not a directory")

        def on_error(err: OSError):
            failed = getattr(err, "filename", None) or self.root_dir
            if self.skip_inaccessible:
                logger.warning(f"Skipping inaccessible directory {failed}: {err.strerror or err}")
                return
            raise ScanError(self.root_dir, err.strerror or str(err), path=str(failed))

        for root, dirs, files in os.walk(str(root_path), onerror=on_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                raise OperationCancelled(f"Scan of {self.root_dir} cancelled")

            dirs.sort()
            dirs[:] = [d for d in dirs if self._prefilter_dir(Path(root) / d)]

            for filename in sorted(files):
                if stopped_flag and stopped_flag():
                    raise OperationCancelled(f"Scan of {self.root_dir} cancelled")

                path = os.path.join(root, filename)
                if self._accept(path):
                    yield path

    def _prefilter_dir(self, path: Path) -> bool:
        """Skip symlinked dirs, system trash and excluded locations."""
        if path.is_symlink():
            logger.debug(f"Skipping symlinked directory: {path}")
            return False

        if DirectoryScanner._is_system_trash(path):
            logger.debug(f"Skipping system trash directory: {path}")
            return False

        if self.excluded_dirs and DirectoryScanner._is_excluded_directory(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        return True

    def _accept(self, path: str) -> bool:
        """True for regular, non-symlink files passing the extension filter."""
        try:
            if os.path.islink(path):
                logger.debug(f"Skipping symbolic link: {path}")
                return False
            if not os.path.isfile(path):
                if not os.path.lexists(path):
                    return self._inaccessible(path, "entry vanished during scan")
                logger.debug(f"Skipping special file: {path}")
                return False
        except OSError as e:
            return self._inaccessible(path, e.strerror or str(e))

        return self._extension_passes(path)

    def _stat_size(self, path: str) -> Optional[int]:
        try:
            return os.stat(path).st_size
        except OSError as e:
            self._inaccessible(path, e.strerror or str(e))
            return None

    def _inaccessible(self, path: str, reason: str) -> bool:
        if self.skip_inaccessible:
            logger.warning(f"Skipping inaccessible entry {path}: {reason}")
            return False
        raise ScanError(self.root_dir, reason, path=path)

    def _extension_passes(self, path: str) -> bool:
        if not self.extensions:
            return True
        return os.path.splitext(path)[1].lower() in self.extensions

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """
        Check if path belongs to OS trash/recycle bin (cross-platform).
        Returns False on any error.
        """
        try:
            path_str = str(path.resolve(strict=False))

            if sys.platform == "win32":
                if "$Recycle.Bin" in path_str or "\\Recycler\\" in path_str:
                    return True
            elif sys.platform == "darwin":
                if "/.Trash/" in path_str or path_str.endswith("/.Trash"):
                    return True
            else:
                name = path.name
                if ".local/share/Trash" in path_str or name.startswith(".Trash-") or name == ".Trash":
                    return True

            return False
        except (OSError, ValueError):
            return False

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is within an excluded directory."""
        try:
            path_str = str(path.resolve(strict=False))
            for excluded_dir in excluded_dirs:
                normalized_excluded = os.path.normpath(excluded_dir)
                if path_str.startswith(normalized_excluded + os.sep) or \
                        path_str == normalized_excluded:
                    return True
            return False
        except (OSError, ValueError):
            return False
