"""Tests for relo parallel orchestrator"""

import threading
from datetime import datetime
from pathlib import Path

import pytest

from relo.core import relocator
from relo.core.errors import SourceDirectoryError
from relo.core.models import CopyOutcome, OutcomeKind, Statistics
from relo.core.path_collector import ScanResult
from relo.core.relocator import partition, process_file, relocate, worker_count


def _files_under(root: Path):
    return sorted(p for p in root.rglob('*') if p.is_file())


@pytest.fixture
def mixed_tree(source_dir, dest_dir, make_file):
    """10 张图片、3 个文本、1 个 Thumbs.db，其中一张图片在目标中已存在"""
    for i in range(10):
        make_file(source_dir / f"d{i % 3}" / f"img{i}.jpg", f"img{i}".encode(), datetime(2024, 1, 1 + i))
    for i in range(3):
        make_file(source_dir / f"note{i}.txt")
    make_file(source_dir / "d0" / "Thumbs.db")
    existing = dest_dir / "2024" / "01-01" / "img0.jpg"
    existing.parent.mkdir(parents=True)
    existing.write_bytes(b"already here")
    return source_dir


class TestRelocate:
    """测试并行转移"""

    def test_end_to_end(self, source_dir, dest_dir, make_file):
        """测试一个接受、一个拒绝的文件"""
        make_file(source_dir / "a.png", b"png", datetime(2024, 3, 7, 9))
        make_file(source_dir / "b.txt", b"txt")

        stats = relocate(source_dir, dest_dir)

        assert stats == Statistics(processed=2, copied=1, skipped=1, errors=0)
        assert _files_under(dest_dir) == [dest_dir / "2024" / "03-07" / "a.png"]

    @pytest.mark.parametrize("jobs", [None, 1, 2, 3, 8, 64])
    def test_aggregation_independent_of_workers(self, mixed_tree, dest_dir, jobs):
        """测试任意线程数得到相同统计"""
        stats = relocate(mixed_tree, dest_dir, jobs)

        assert stats == Statistics(processed=14, copied=9, skipped=5, errors=0)
        assert stats.is_consistent
        assert (dest_dir / "2024" / "01-01" / "img0.jpg").read_bytes() == b"already here"

    def test_rerun_skips_everything(self, mixed_tree, dest_dir):
        """测试重复运行不再复制"""
        relocate(mixed_tree, dest_dir, 4)
        stats = relocate(mixed_tree, dest_dir, 4)
        assert stats == Statistics(processed=14, copied=0, skipped=14, errors=0)

    def test_missing_source_has_no_side_effects(self, tmp_path, dest_dir):
        """测试源目录不存在时直接失败，不创建目标目录"""
        with pytest.raises(SourceDirectoryError):
            relocate(tmp_path / "missing", dest_dir)
        assert not dest_dir.exists()

    def test_source_is_file(self, tmp_path, dest_dir, make_file):
        with pytest.raises(SourceDirectoryError):
            relocate(make_file(tmp_path / "a.jpg"), dest_dir)

    def test_empty_source(self, source_dir, dest_dir):
        assert relocate(source_dir, dest_dir) == Statistics()

    def test_scan_errors_added_to_errors(self, source_dir, dest_dir, make_file, monkeypatch):
        """测试遍历错误只计入 errors"""
        files = [make_file(source_dir / "a.jpg"), make_file(source_dir / "b.txt")]
        monkeypatch.setattr(relocator, "enumerate_files", lambda root: ScanResult(files, errors=2))

        stats = relocate(source_dir, dest_dir, 2)

        assert stats.processed == 2
        assert stats.copied == 1
        assert stats.skipped == 1
        assert stats.errors == 2
        assert stats.is_consistent

    def test_failures_counted_and_logged(self, source_dir, dest_dir, make_file, monkeypatch, log_records):
        """测试单个文件失败计入错误数且不中断"""
        make_file(source_dir / "a.jpg")
        make_file(source_dir / "b.jpg")

        def fake_copy(source, dest_root, use_links=True):
            return CopyOutcome.failed(source, f"无法复制 {source.name}")

        monkeypatch.setattr(relocator, "copy_one", fake_copy)

        stats = relocate(source_dir, dest_dir, 2)

        assert stats == Statistics(processed=2, errors=2)
        errors = [r["message"] for r in log_records if r["level"].name == "ERROR"]
        assert any("a.jpg" in m for m in errors)
        assert any("b.jpg" in m for m in errors)

    def test_callbacks(self, mixed_tree, dest_dir):
        """测试进度回调"""
        seen = []
        totals = []
        lock = threading.Lock()

        def on_outcome(outcome):
            with lock:
                seen.append(outcome)

        relocate(mixed_tree, dest_dir, 4, on_outcome=on_outcome, on_scanned=totals.append)

        assert totals == [14]
        assert len(seen) == 14
        assert len({o.source for o in seen}) == 14

    def test_failing_callback_does_not_abort(self, mixed_tree, dest_dir, log_records):
        """测试回调抛出异常时转移照常完成"""
        def on_outcome(outcome):
            raise RuntimeError("progress broke")

        stats = relocate(mixed_tree, dest_dir, 3, on_outcome=on_outcome)

        assert stats == Statistics(processed=14, copied=9, skipped=5, errors=0)
        assert any(
            r["level"].name == "WARNING" and "progress broke" in r["message"] for r in log_records
        )

    def test_summary_logged(self, source_dir, dest_dir, make_file, log_records):
        make_file(source_dir / "a.png")
        relocate(source_dir, dest_dir)
        assert any("转移总结" in r["message"] for r in log_records)


class TestProcessFile:
    """测试单个文件处理"""

    def test_rejected_file_not_copied(self, source_dir, dest_dir, make_file, monkeypatch):
        """测试被拒绝的文件不调用复制"""
        def fail_copy(*args, **kwargs):
            raise AssertionError("should not copy")

        monkeypatch.setattr(relocator, "copy_one", fail_copy)
        outcome = process_file(make_file(source_dir / "b.txt"), dest_dir)
        assert outcome.kind == OutcomeKind.SKIPPED_UNSUPPORTED

    def test_unexpected_error_becomes_failure(self, source_dir, dest_dir, make_file, monkeypatch):
        def boom(path):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(relocator, "classify_path", boom)
        outcome = process_file(make_file(source_dir / "a.jpg"), dest_dir)
        assert outcome.kind == OutcomeKind.FAILED
        assert "unexpected" in outcome.reason


class TestWorkers:
    """测试线程数和分区"""

    def test_worker_count(self, monkeypatch):
        monkeypatch.setattr(relocator.os, "cpu_count", lambda: 8)
        assert worker_count(4, 100) == 4
        assert worker_count(None, 100) == 8
        assert worker_count(0, 100) == 8
        assert worker_count(16, 3) == 3
        assert worker_count(None, 0) == 1

    def test_worker_count_without_cpu_count(self, monkeypatch):
        monkeypatch.setattr(relocator.os, "cpu_count", lambda: None)
        assert worker_count(None, 10) == 1

    def test_partition_covers_all(self):
        files = [Path(f"/f{i}") for i in range(10)]
        parts = partition(files, 3)
        assert len(parts) == 3
        assert sorted(f for p in parts for f in p) == sorted(files)
