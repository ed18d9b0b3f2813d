"""
Qt integration for filesweep (requires the [gui] extra: PySide6).
"""
from .worker import WorkerSignals, EngineWorker, DuplicateScanWorker, LargeFileWorker, DeleteWorker

__all__ = ["WorkerSignals", "EngineWorker", "DuplicateScanWorker", "LargeFileWorker", "DeleteWorker"]
