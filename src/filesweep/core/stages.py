"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Refinement stages of the duplicate pipeline.

STAGE CONTRACTS
---------------
SizeStage      : one flat candidate list → groups of 2+ same-size files
FrontHashStage : splits groups of large files by xxHash64 of the first chunk
FullHashStage  : final verification, maps ContentKey → files (parallel hashing)

Every stage:
  • drops files whose hashing fails (HashError) and records them in `skipped`
  • honours stopped_flag between files (raises OperationCancelled)
  • reports progress via progress_callback(stage name, processed, total)
"""

import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List

from filesweep.core.hasher import ContentHasher, DEFAULT_BLOCK_SIZE
from filesweep.core.interfaces import GroupingStage, ProgressCallback, StoppedFlag
from filesweep.core.models import ContentKey, FileRecord, Stage
from filesweep.errors import HashError, OperationCancelled

logger = logging.getLogger(__name__)


def _check_stopped(stopped_flag: StoppedFlag, stage: str) -> None:
    if stopped_flag and stopped_flag():
        logger.debug(f"{stage} interrupted by user")
        raise OperationCancelled(f"{stage} cancelled")


class StageBase:
    name = ""

    def __init__(self):
        self.skipped: List[str] = []

    def _group_by(
        self,
        records: List[FileRecord],
        key_func: Callable[[FileRecord], Any],
        stopped_flag: StoppedFlag = None
    ) -> List[List[FileRecord]]:
        """
        Groups records by a computed key, dropping records whose key raises HashError
        and every resulting group with fewer than 2 records. Input order is kept.
        """
        groups = defaultdict(list)
        for record in records:
            _check_stopped(stopped_flag, self.name)
            try:
                groups[key_func(record)].append(record)
            except HashError as e:
                logger.warning(f"Skipping {record.path}: {e.reason}")
                self.skipped.append(record.path)

        return [group for group in groups.values() if len(group) >= 2]


class SizeStage(StageBase, GroupingStage):
    name = Stage.SIZE.value

    def process(
        self,
        groups: List[List[FileRecord]],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[List[FileRecord]]:
        result = []
        total_files = sum(len(group) for group in groups)
        for group in groups:
            result.extend(self._group_by(group, lambda r: r.size, stopped_flag))

        if progress_callback:
            progress_callback(self.name, total_files, total_files)
        return result


class FrontHashStage(StageBase, GroupingStage):
    """
    Files no larger than one chunk pass through untouched: for them the front
    hash would cost as much as the full hash.
    """
    name = Stage.FRONT.value

    def __init__(self, hasher: ContentHasher, chunk_size: int = DEFAULT_BLOCK_SIZE):
        super().__init__()
        self.hasher = hasher
        self.chunk_size = chunk_size

    def process(
        self,
        groups: List[List[FileRecord]],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> List[List[FileRecord]]:
        result = []
        total_files = sum(len(group) for group in groups)
        processed_files = 0

        for group in groups:
            _check_stopped(stopped_flag, self.name)

            if group[0].size <= self.chunk_size:
                result.append(group)
            else:
                result.extend(self._group_by(
                    group,
                    lambda r: self.hasher.compute_front_hash(r.path, self.chunk_size),
                    stopped_flag
                ))

            processed_files += len(group)
            if progress_callback:
                progress_callback(self.name, processed_files, total_files)

        return result


class FullHashStage(StageBase):
    """
    Hashes every remaining candidate. With workers > 1 the digests are computed
    in a thread pool; insertion into the shared key map is serialized by a lock.
    """
    name = Stage.FULL.value

    def __init__(self, hasher: ContentHasher, workers: int = 1):
        super().__init__()
        self.hasher = hasher
        self.workers = max(1, workers)
        self._lock = threading.Lock()

    def process(
        self,
        groups: List[List[FileRecord]],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None
    ) -> Dict[ContentKey, List[FileRecord]]:
        key_map: Dict[ContentKey, List[FileRecord]] = defaultdict(list)
        records = [record for group in groups for record in group]
        total_files = len(records)

        if self.workers == 1 or total_files < 2:
            for processed, record in enumerate(records, 1):
                _check_stopped(stopped_flag, self.name)
                self._hash_into(record, key_map, stopped_flag)
                if progress_callback:
                    progress_callback(self.name, processed, total_files)
            return dict(key_map)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(self._hash_into, record, key_map, stopped_flag) for record in records]
            try:
                for processed, future in enumerate(as_completed(futures), 1):
                    future.result()
                    if progress_callback:
                        progress_callback(self.name, processed, total_files)
                    _check_stopped(stopped_flag, self.name)
            except OperationCancelled:
                for future in futures:
                    future.cancel()
                raise

        return dict(key_map)

    def _hash_into(
        self,
        record: FileRecord,
        key_map: Dict[ContentKey, List[FileRecord]],
        stopped_flag: StoppedFlag = None
    ) -> None:
        _check_stopped(stopped_flag, self.name)
        try:
            digest = self.hasher.compute_full_hash(record.path, stopped_flag=stopped_flag)
        except HashError as e:
            logger.warning(f"Skipping {record.path}: {e.reason}")
            with self._lock:
                self.skipped.append(record.path)
            return

        key = ContentKey(digest=digest, size=record.size)
        with self._lock:
            key_map[key].append(record)
