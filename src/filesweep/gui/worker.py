"""
Qt worker runnables: follows modern Qt pattern: QRunnable + QThreadPool.
Each worker wraps one SweepEngine call and reports through WorkerSignals.
"""
from typing import Iterable, Optional, Sequence

from PySide6.QtCore import QRunnable, QObject, Signal, QMutex, QMutexLocker

from filesweep.core.models import SweepFeature
from filesweep.engine import SweepEngine
from filesweep.errors import OperationCancelled


class WorkerSignals(QObject):
    """Separate QObject to hold signals (QRunnable cannot emit signals directly)."""
    progress = Signal(str, int, object)  # stage, current, total
    finished = Signal(object)            # DuplicateScanResult / LargeFileResult / BatchResult
    error = Signal(str)
    cancelled = Signal()


class EngineWorker(QRunnable):
    """
    Base runnable: mutex-guarded stop flag, progress forwarding and
    error/cancel reporting. Subclasses implement execute().
    Automatically deleted after execution (setAutoDelete=True).
    """
    cancellable = True

    def __init__(self, engine: SweepEngine):
        super().__init__()
        self.engine = engine
        self.signals = WorkerSignals()
        self._stopped = False
        self._mutex = QMutex()
        self.setAutoDelete(True)

    def stop(self):
        """Sets the stopped flag to signal the worker to terminate gracefully."""
        with QMutexLocker(self._mutex):
            self._stopped = True

    def is_stopped(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._stopped

    def safe_progress_emit(self, stage: str, current: int, total=None):
        """Emits progress signal safely with mutex protection."""
        with QMutexLocker(self._mutex):
            if not self._stopped:
                try:
                    self.signals.progress.emit(stage, current, total)
                except RuntimeError:
                    pass

    def execute(self):
        raise NotImplementedError

    def run(self):
        """Main execution method. Runs in thread pool thread."""
        try:
            if self.is_stopped():
                self.signals.cancelled.emit()
                return

            result = self.execute()

            if self.cancellable and self.is_stopped():
                self.signals.cancelled.emit()
            else:
                self.signals.finished.emit(result)
        except OperationCancelled:
            self.signals.cancelled.emit()
        except Exception as e:
            if not self.is_stopped():
                self.signals.error.emit(f"{type(e).__name__}: {str(e)}")


class DuplicateScanWorker(EngineWorker):
    def __init__(self, engine: SweepEngine, root: str, extensions: Optional[Iterable[str]] = None):
        super().__init__(engine)
        self.root = root
        self.extensions = extensions

    def execute(self):
        return self.engine.scan_duplicates(
            self.root,
            self.extensions,
            stopped_flag=self.is_stopped,
            progress_callback=self.safe_progress_emit
        )


class LargeFileWorker(EngineWorker):
    def __init__(self, engine: SweepEngine, roots: Sequence[str]):
        super().__init__(engine)
        self.roots = list(roots)

    def execute(self):
        return self.engine.scan_large_files(
            self.roots,
            stopped_flag=self.is_stopped,
            progress_callback=self.safe_progress_emit
        )


class DeleteWorker(EngineWorker):
    """
    Removes (or renames, when prefix is given) a batch of paths.
    A started batch always runs to the end so the audit log matches the disk.
    """
    cancellable = False

    def __init__(
            self,
            engine: SweepEngine,
            paths: Iterable[str],
            method: SweepFeature = SweepFeature.MANUAL,
            prefix: Optional[str] = None
    ):
        super().__init__(engine)
        self.paths = list(paths)
        self.method = method
        self.prefix = prefix

    def execute(self):
        if self.prefix:
            return self.engine.rename(
                self.paths, self.prefix, self.method, progress_callback=self.safe_progress_emit
            )
        return self.engine.delete(self.paths, self.method, progress_callback=self.safe_progress_emit)
