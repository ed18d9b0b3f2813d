"""
Tests for DeletionAuditLog: append-only trail and its tab-separated export.
"""
import threading
import time

from filesweep.services.audit_log import DeletionAuditLog, escape_field


def _ts(*parts):
    return time.mktime(parts + (0, 0, -1))


class TestDeletionAuditLog:
    def test_empty_log_exports_empty_string(self):
        assert DeletionAuditLog().export() == ""

    def test_export_format(self):
        log = DeletionAuditLog()
        log.append("/data/a.txt", "duplicates", timestamp=_ts(2024, 1, 2, 3, 4, 5))
        log.append("/data/b.txt", "large-files", timestamp=_ts(2024, 1, 2, 3, 4, 6))

        assert log.export() == (
            "2024-01-02 03:04:05\t/data/a.txt\tduplicates\n"
            "2024-01-02 03:04:06\t/data/b.txt\tlarge-files\n"
        )

    def test_records_in_completion_order(self):
        log = DeletionAuditLog()
        log.append("/1", "manual")
        log.append("/2", "manual")
        assert [r.path for r in log.records()] == ["/1", "/2"]
        assert len(log) == 2

    def test_records_snapshot_is_immutable(self):
        log = DeletionAuditLog()
        log.append("/1", "manual")
        snapshot = log.records()
        log.append("/2", "manual")
        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)

    def test_clear(self):
        log = DeletionAuditLog()
        log.append("/1", "manual")
        log.clear()
        assert log.export() == ""

    def test_special_characters_escaped(self):
        assert escape_field("a\tb\nc\\d") == "a\\tb\\nc\\\\d"
        log = DeletionAuditLog()
        log.append("/odd\tname", "manual", timestamp=_ts(2024, 1, 1, 0, 0, 0))
        assert log.export().count("\t") == 2

    def test_concurrent_appends_are_all_kept(self):
        log = DeletionAuditLog()

        def worker(n):
            for i in range(100):
                log.append(f"/t{n}/{i}", "manual")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(log) == 800

    def test_write_to_appends(self, tmp_path):
        out = tmp_path / "audit.tsv"
        log = DeletionAuditLog()
        log.append("/a", "manual", timestamp=_ts(2024, 1, 1, 0, 0, 0))

        assert log.write_to(str(out)) == 1
        log.write_to(str(out))

        assert out.read_text(encoding="utf-8").count("/a") == 2

    def test_write_to_overwrite(self, tmp_path):
        out = tmp_path / "audit.tsv"
        out.write_text("old\n")
        log = DeletionAuditLog()
        log.append("/a", "manual", timestamp=_ts(2024, 1, 1, 0, 0, 0))

        log.write_to(str(out), append=False)

        assert out.read_text(encoding="utf-8") == "2024-01-01 00:00:00\t/a\tmanual\n"
