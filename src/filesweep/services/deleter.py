"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/deleter.py
Best-effort batch removal and rename.

Every path is handled independently: a failure is recorded as a DeleteError
(or RenameError) and the batch moves on. Only successes reach the audit log.
"""
import logging
from typing import Iterable, Optional, Type

from filesweep.core.interfaces import ProgressCallback
from filesweep.core.models import BatchResult, Stage, SweepFeature
from filesweep.errors import DeleteError, RenameError
from filesweep.services.audit_log import DeletionAuditLog
from filesweep.services.file_service import FileService

logger = logging.getLogger(__name__)


def describe_failure(exc: Exception) -> str:
    """Short, stable reason for a per-path failure."""
    if isinstance(exc, FileNotFoundError):
        return "not found"
    if isinstance(exc, FileExistsError):
        return "destination exists"
    if isinstance(exc, IsADirectoryError):
        return "is a directory"
    if isinstance(exc, PermissionError):
        return "permission denied"
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)


class SafeDeleter:
    """
    Attributes:
        audit_log: receives one DeletionRecord per successful path
        use_trash: move to the system trash (default) instead of unlinking
    """

    def __init__(self, audit_log: DeletionAuditLog, use_trash: bool = True):
        self.audit_log = audit_log
        self.use_trash = use_trash

    def delete(
        self,
        paths: Iterable[str],
        method: str = SweepFeature.MANUAL.value,
        progress_callback: ProgressCallback = None
    ) -> BatchResult:
        remove = FileService.move_to_trash if self.use_trash else FileService.delete_permanently
        method = getattr(method, "value", method)

        def apply(path: str):
            remove(path)
            return None

        return self._run_batch(paths, method, apply, DeleteError, Stage.DELETE.value, progress_callback)

    def rename(
        self,
        paths: Iterable[str],
        prefix: str,
        feature: Optional[str] = None,
        progress_callback: ProgressCallback = None
    ) -> BatchResult:
        """
        Renames each path to '<prefix>_<name>' in its own directory.
        Audited as 'rename', or 'rename:<feature>' when the feature that asked
        for it is given.

        Raises:
            ValueError: invalid prefix (nothing is touched)
        """
        FileService.validate_prefix(prefix)
        method = SweepFeature.RENAME.value
        if feature is not None:
            method = f"{method}:{getattr(feature, 'value', feature)}"

        def apply(path: str):
            return FileService.rename_with_prefix(path, prefix)

        return self._run_batch(
            paths, method, apply, RenameError, Stage.RENAME.value, progress_callback
        )

    def _run_batch(
        self,
        paths: Iterable[str],
        method: str,
        apply,
        error_type: Type[DeleteError],
        stage: str,
        progress_callback: ProgressCallback = None
    ) -> BatchResult:
        paths = [str(p) for p in paths]
        result = BatchResult()
        seen = set()

        for processed, path in enumerate(paths, 1):
            if path in seen:
                result.add_error(error_type(path, "duplicate entry in batch"))
                continue
            seen.add(path)

            try:
                new_path = apply(path)
            except Exception as e:
                reason = describe_failure(e)
                logger.warning(f"{stage} failed for {path}: {reason}")
                result.add_error(error_type(path, reason))
            else:
                self.audit_log.append(path, method)
                result.add_success(path, new_path)
                logger.debug(f"{stage} ok: {path}" + (f" -> {new_path}" if new_path else ""))

            if progress_callback:
                progress_callback(stage, processed, len(paths))

        logger.info(f"{stage}: {result.success_count} succeeded, {result.failure_count} failed")
        return result
