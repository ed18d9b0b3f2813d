"""
Tests for LargeFileRanker: multi-root ranking by descending size.
"""
import os
from unittest import mock

import pytest

from filesweep.core.ranker import LargeFileRanker
from filesweep.errors import OperationCancelled, ScanError


@pytest.fixture
def sized_tree(temp_dir):
    """Three files of 10, 500 and 50 bytes."""
    sizes = {"small.bin": 10, "big.bin": 500, "medium.bin": 50}
    for name, size in sizes.items():
        (temp_dir / name).write_bytes(b"x" * size)
    return temp_dir


class TestLargeFileRanker:
    def test_ranks_descending(self, sized_tree):
        ranked = LargeFileRanker().rank([str(sized_tree)])
        assert [e.size for e in ranked] == [500, 50, 10]
        assert ranked[0].path == str(sized_tree / "big.bin")

    def test_merges_several_roots(self, temp_dir):
        left = temp_dir / "left"
        right = temp_dir / "right"
        left.mkdir()
        right.mkdir()
        (left / "a").write_bytes(b"x" * 30)
        (right / "b").write_bytes(b"x" * 40)
        (left / "c").write_bytes(b"x" * 20)

        ranked = LargeFileRanker().rank([str(left), str(right)])
        assert [e.size for e in ranked] == [40, 30, 20]

    def test_overlapping_roots_count_file_once(self, sized_tree):
        ranked = LargeFileRanker().rank([str(sized_tree), str(sized_tree)])
        assert len(ranked) == 3

    def test_min_size_and_limit(self, sized_tree):
        assert [e.size for e in LargeFileRanker(min_size=50).rank([str(sized_tree)])] == [500, 50]
        assert [e.size for e in LargeFileRanker(limit=1).rank([str(sized_tree)])] == [500]

    def test_vanished_file_dropped_silently(self, sized_tree):
        real_stat = os.stat

        def flaky_stat(path, *args, **kwargs):
            if str(path).endswith("medium.bin"):
                raise FileNotFoundError(2, "No such file or directory", str(path))
            return real_stat(path, *args, **kwargs)

        with mock.patch("filesweep.core.ranker.os.stat", side_effect=flaky_stat):
            ranked = LargeFileRanker().rank([str(sized_tree)])

        assert [e.size for e in ranked] == [500, 10]

    def test_empty_roots_rejected(self):
        with pytest.raises(ValueError):
            LargeFileRanker().rank([])

    def test_missing_root_raises_scan_error(self, temp_dir):
        with pytest.raises(ScanError):
            LargeFileRanker().rank([str(temp_dir / "missing")])

    def test_cancellation(self, sized_tree):
        with pytest.raises(OperationCancelled):
            LargeFileRanker().rank([str(sized_tree)], stopped_flag=lambda: True)

    def test_progress_reports_final_count(self, sized_tree):
        calls = []
        LargeFileRanker().rank([str(sized_tree)], progress_callback=lambda *a: calls.append(a))
        assert calls[-1] == ("Ranking", 3, 3)
