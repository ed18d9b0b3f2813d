"""
Tests for data models and SweepParams validation.
"""
import pytest

from filesweep.core.models import (
    BatchResult, ContentKey, DuplicateGroup, DuplicateSortOrder, FileRecord,
    HashAlgorithmName, ScanStats, SweepParams, normalize_extensions
)
from filesweep.errors import DeleteError, RenameError


class TestContentKey:
    def test_equal_digest_and_size_are_equal(self):
        assert ContentKey(b"\x01\x02", 5) == ContentKey(b"\x01\x02", 5)

    def test_size_is_part_of_identity(self):
        assert ContentKey(b"\x01\x02", 5) != ContentKey(b"\x01\x02", 6)

    def test_hashable(self):
        assert len({ContentKey(b"\x01", 1), ContentKey(b"\x01", 1)}) == 1

    def test_digest_hex(self):
        assert ContentKey(b"\xab\xcd", 2).digest_hex == "abcd"

    def test_rejects_non_bytes_digest(self):
        with pytest.raises(ValueError):
            ContentKey("abcd", 2)


class TestDuplicateGroup:
    def test_requires_two_members(self):
        with pytest.raises(ValueError):
            DuplicateGroup(key=ContentKey(b"\x00", 10), members=["/only"])

    def test_wasted_bytes(self):
        group = DuplicateGroup(key=ContentKey(b"\x00", 10), members=["/a", "/b", "/c"])
        assert group.count == 3
        assert group.size == 10
        assert group.wasted_bytes == 20


class TestFileRecord:
    def test_name_and_extension(self):
        record = FileRecord(path="/photos/IMG_1.JPG", size=3)
        assert record.name == "IMG_1.JPG"
        assert record.extension == ".jpg"


class TestNormalizeExtensions:
    @pytest.mark.parametrize("raw, expected", [
        (None, []),
        ("", []),
        ("jpg", [".jpg"]),
        (".JPG, png,,", [".jpg", ".png"]),
        ([".Txt", "txt"], [".txt"]),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_extensions(raw) == expected


class TestBatchResult:
    def test_counts_and_pairs(self):
        result = BatchResult()
        result.add_success("/a")
        result.add_success("/b", "/x_b")
        result.add_error(RenameError("/c", "not found"))

        assert result.success_count == 2
        assert result.failure_count == 1
        assert not result.ok
        assert result.renamed == {"/b": "/x_b"}
        assert result.error_pairs() == [("/c", "not found")]

    def test_errors_compare_by_type_path_and_reason(self):
        assert DeleteError("/a", "not found") == DeleteError("/a", "not found")
        assert DeleteError("/a", "not found") != RenameError("/a", "not found")


class TestScanStats:
    def test_listener_receives_stage_updates(self):
        stats = ScanStats()
        events = []
        stats.add_listener(lambda stage, payload: events.append((stage, payload)))

        stats.notify_stage_start("Full Hash")
        stats.update_stage("Full Hash", groups_found=2, files_processed=5, duration=0.5)

        assert events[0] == ("Full Hash", {"status": "started"})
        assert events[1][1]["files"] == 5
        assert "Full Hash: 2 / 5" in stats.summary()

    def test_failing_listener_does_not_break_update(self):
        stats = ScanStats()
        stats.add_listener(lambda *a: 1 / 0)
        stats.update_stage("Size grouping", 1, 2, 0.1)
        assert stats.stage_stats["Size grouping"]["groups"] == 1


class TestSweepParams:
    def test_defaults(self):
        params = SweepParams()
        assert params.page_size == 20
        assert params.sort_order == DuplicateSortOrder.PATH
        assert params.hash_algorithm == HashAlgorithmName.SHA256
        assert params.use_trash is True
        assert params.skip_inaccessible is False

    @pytest.mark.parametrize("kwargs", [
        {"page_size": 0},
        {"workers": 0},
        {"min_size_bytes": -1},
        {"limit": 0},
        {"roots": [""]},
        {"sort_order": "random"},
        {"hash_algorithm": "md5"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SweepParams(**kwargs)

    def test_string_enums_coerced(self):
        params = SweepParams(sort_order="size", hash_algorithm="xxh128", extensions="JPG,png")
        assert params.sort_order == DuplicateSortOrder.SIZE
        assert params.hash_algorithm == HashAlgorithmName.XXH128
        assert params.extensions == [".jpg", ".png"]

    def test_from_human_readable(self):
        params = SweepParams.from_human_readable(
            roots=["/data"],
            extensions_str="jpg, .PNG",
            min_size_str="1.5K",
            sort_order="size",
            page_size=50,
            limit=10,
        )
        assert params.roots == ["/data"]
        assert params.extensions == [".jpg", ".png"]
        assert params.min_size_bytes == 1536
        assert params.sort_order == DuplicateSortOrder.SIZE
        assert params.page_size == 50
        assert params.limit == 10

    def test_from_human_readable_invalid_size(self):
        with pytest.raises(ValueError):
            SweepParams.from_human_readable(roots=["/data"], min_size_str="lots")
