"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/audit_log.py
Append-only record of every successful removal or rename.

Export format: one line per record, `timestamp<TAB>path<TAB>method`,
trailing newline, no header.
"""
import logging
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from filesweep.core.models import DeletionRecord
from filesweep.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"

_ESCAPES = str.maketrans({"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"})


def escape_field(value: str) -> str:
    """Backslash-escape characters that would break the line format."""
    return value.translate(_ESCAPES)


class DeletionAuditLog:
    """
    Records are kept in completion order. Appends from concurrent batches are
    serialized; records are never edited, the log can only be wiped as a whole.
    """

    def __init__(self):
        self._records = []
        self._lock = threading.Lock()

    def append(self, path: str, method: str, timestamp: Optional[float] = None) -> DeletionRecord:
        with self._lock:
            record = DeletionRecord(
                timestamp=time.time() if timestamp is None else timestamp,
                path=str(path),
                method=str(method)
            )
            self._records.append(record)
        logger.debug(f"Audit: {record.method} {record.path}")
        return record

    def records(self) -> Tuple[DeletionRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def clear(self) -> None:
        with self._lock:
            count = len(self._records)
            self._records = []
        logger.info(f"Audit log cleared ({count} records dropped)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @staticmethod
    def format_record(record: DeletionRecord) -> str:
        return FIELD_SEPARATOR.join((
            ConvertUtils.timestamp_to_human(record.timestamp),
            escape_field(record.path),
            escape_field(record.method),
        ))

    def export(self) -> str:
        return "".join(f"{self.format_record(r)}\n" for r in self.records())

    def write_to(self, file_path: str, append: bool = True) -> int:
        """
        Writes the export to file_path. Returns the number of records written.
        """
        records = self.records()
        mode = "a" if append else "w"
        with open(Path(file_path), mode, encoding="utf-8", newline="\n") as f:
            for record in records:
                f.write(f"{self.format_record(record)}\n")
        logger.info(f"Wrote {len(records)} audit records to {file_path}")
        return len(records)
