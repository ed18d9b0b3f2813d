"""
End-to-end tests for SweepEngine: scan → group/rank → page → delete → audit.
"""
import pytest

from filesweep.core.hasher import ContentHasher
from filesweep.core.models import SweepFeature, SweepParams
from filesweep.engine import SweepEngine
from filesweep.errors import OperationCancelled, ScanError
from filesweep.services.audit_log import DeletionAuditLog


@pytest.fixture
def engine():
    return SweepEngine(SweepParams(use_trash=False, workers=2))


class TestDuplicateWorkflow:
    def test_hello_world(self, engine, temp_dir):
        (temp_dir / "A").write_bytes(b"hello")
        (temp_dir / "B").write_bytes(b"hello")
        (temp_dir / "C").write_bytes(b"world")

        result = engine.scan_duplicates(str(temp_dir))

        assert len(result.groups) == 1
        assert result.groups[0].members == [str(temp_dir / "A"), str(temp_dir / "B")]
        assert [r.path for r in result.pages.page_items()] == [str(temp_dir / "A"), str(temp_dir / "B")]
        assert result.stats.files_scanned == 3
        assert result.stats.groups_found == 1

    def test_extension_filter_override(self, engine, temp_dir, test_files):
        result = engine.scan_duplicates(str(temp_dir), extensions=".tmp")
        assert result.groups == []

    def test_scan_then_find_duplicates(self, engine, temp_dir, test_files):
        records = engine.scan(str(temp_dir), extensions="txt")
        assert str(test_files["filtered"]) not in {r.path for r in records}
        groups = engine.find_duplicates(records)
        assert len(groups) == 2

    def test_keep_one_delete_and_discard(self, engine, temp_dir, test_files):
        result = engine.scan_duplicates(str(temp_dir))
        doomed = [p for g in result.groups for p in g.members[1:]]

        outcome = engine.delete(doomed, SweepFeature.DUPLICATES)
        result.discard(outcome.succeeded)

        assert outcome.ok
        assert result.groups == []
        assert result.pages.is_empty
        assert engine.scan_duplicates(str(temp_dir)).groups == []
        assert {r.method for r in engine.audit_records()} == {"duplicates"}

    def test_missing_root_raises(self, engine, temp_dir):
        with pytest.raises(ScanError):
            engine.scan_duplicates(str(temp_dir / "missing"))

    def test_cancelled_scan(self, engine, temp_dir, test_files):
        with pytest.raises(OperationCancelled):
            engine.scan_duplicates(str(temp_dir), stopped_flag=lambda: True)


class TestLargeFileWorkflow:
    def test_sizes_ranked(self, engine, temp_dir):
        for name, size in (("a", 10), ("b", 500), ("c", 50)):
            (temp_dir / name).write_bytes(b"x" * size)

        result = engine.scan_large_files([str(temp_dir)])

        assert [e.size for e in result.entries] == [500, 50, 10]
        assert result.pages.total_pages == 1

    def test_params_min_size_and_limit(self, temp_dir):
        for name, size in (("a", 10), ("b", 500), ("c", 50)):
            (temp_dir / name).write_bytes(b"x" * size)

        engine = SweepEngine(SweepParams(min_size_bytes=20, limit=1))
        assert [e.size for e in engine.rank_large_files([str(temp_dir)])] == [500]


class TestRemovalAndAudit:
    def test_delete_nonexistent_path(self, engine, temp_dir):
        result = engine.delete([str(temp_dir / "nonexistent")])
        assert result.success_count == 0
        assert result.error_pairs() == [(str(temp_dir / "nonexistent"), "not found")]
        assert engine.export_audit_log() == ""

    def test_rename_with_bak(self, engine, temp_dir):
        source = temp_dir / "x.txt"
        source.write_text("x")

        result = engine.rename([str(source)], "bak")

        assert result.ok
        assert (temp_dir / "bak_x.txt").exists()
        lines = engine.export_audit_log().splitlines()
        assert len(lines) == 1
        assert lines[0].endswith(f"\t{source}\trename")

    def test_rename_keeps_content_and_moves_it_in_later_scans(self, engine, temp_dir):
        source = temp_dir / "x.txt"
        source.write_bytes(b"payload" * 100)
        hasher = ContentHasher()
        digest_before = hasher.compute_full_hash(str(source))

        assert engine.rename([str(source)], "bak").ok

        renamed = temp_dir / "bak_x.txt"
        assert hasher.compute_full_hash(str(renamed)) == digest_before
        assert [r.path for r in engine.scan(str(temp_dir))] == [str(renamed)]

    def test_audit_log_survives_scans_and_can_be_shared(self, temp_dir):
        shared = DeletionAuditLog()
        engine = SweepEngine(SweepParams(use_trash=False), audit_log=shared)
        f = temp_dir / "f.txt"
        f.write_text("f")

        engine.delete([str(f)])
        engine.scan_duplicates(str(temp_dir))

        assert engine.audit_log is shared
        assert len(shared) == 1

    def test_write_and_clear_audit_log(self, engine, temp_dir):
        f = temp_dir / "f.txt"
        f.write_text("f")
        engine.delete([str(f)], "manual")

        out = temp_dir / "audit.tsv"
        assert engine.write_audit_log(str(out)) == 1
        engine.clear_audit_log()

        assert engine.audit_records() == ()
        assert out.read_text(encoding="utf-8").endswith(f"\t{f}\tmanual\n")
