"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Pipeline-based duplicate detection: size → front-chunk hash → full hash.
Only groups of 2+ files sharing a ContentKey (digest, size) are emitted.
"""
import logging
import time
from typing import List, Optional

from filesweep.core.hasher import ContentHasher, DEFAULT_BLOCK_SIZE
from filesweep.core.interfaces import ProgressCallback, StoppedFlag
from filesweep.core.models import DuplicateGroup, FileRecord, ScanStats
from filesweep.core.stages import FrontHashStage, FullHashStage, SizeStage

logger = logging.getLogger(__name__)


class DuplicateGrouper:
    """
    Keys files by (digest, size) and keeps groups with at least two members.

    Members keep the order in which the records were given (scan order);
    groups are ordered by their first member path, then size.
    """

    def __init__(
        self,
        hasher: ContentHasher = None,
        workers: int = 1,
        front_chunk_size: int = DEFAULT_BLOCK_SIZE
    ):
        self.hasher = hasher or ContentHasher()
        self.workers = workers
        self.front_chunk_size = front_chunk_size

    def find_duplicates(
        self,
        records: List[FileRecord],
        stopped_flag: StoppedFlag = None,
        progress_callback: ProgressCallback = None,
        stats: Optional[ScanStats] = None
    ) -> List[DuplicateGroup]:
        """
        Args:
            records: scanned files
            stopped_flag: returns True when the caller wants to cancel
            progress_callback: (stage, current, total)
            stats: optional collector updated per stage
        Returns:
            Duplicate groups; files failing HashError are silently excluded.
        """
        stats = stats if stats is not None else ScanStats()
        total_start_time = time.time()

        # Same path twice (overlapping inputs) must not look like a duplicate
        order = {}
        unique_records = []
        for record in records:
            if record.path not in order:
                order[record.path] = len(order)
                unique_records.append(record)

        size_stage = SizeStage()
        front_stage = FrontHashStage(self.hasher, chunk_size=self.front_chunk_size)
        full_stage = FullHashStage(self.hasher, workers=self.workers)

        groups = [unique_records]
        for stage in (size_stage, front_stage):
            stats.notify_stage_start(stage.name)
            start_time = time.time()
            groups = stage.process(groups, stopped_flag=stopped_flag, progress_callback=progress_callback)
            stats.update_stage(
                stage.name,
                groups_found=len(groups),
                files_processed=sum(len(g) for g in groups),
                duration=time.time() - start_time
            )

        stats.notify_stage_start(full_stage.name)
        start_time = time.time()
        key_map = full_stage.process(groups, stopped_flag=stopped_flag, progress_callback=progress_callback)

        duplicates = []
        for key, members in key_map.items():
            if len(members) < 2:
                continue
            members.sort(key=lambda r: order[r.path])
            duplicates.append(DuplicateGroup(key=key, members=[r.path for r in members]))

        duplicates.sort(key=lambda g: (g.members[0], g.size))

        stats.update_stage(
            full_stage.name,
            groups_found=len(duplicates),
            files_processed=sum(g.count for g in duplicates),
            duration=time.time() - start_time
        )
        stats.files_skipped += len(size_stage.skipped) + len(front_stage.skipped) + len(full_stage.skipped)
        stats.groups_found = len(duplicates)
        stats.total_time += time.time() - total_start_time

        logger.info(f"Found {len(duplicates)} duplicate groups among {len(unique_records)} files")
        return duplicates
