"""Tests for baseline (trunk commit) coverage.

Covers:
- Source text joined onto every instrumented line
- Skip-on-fetch-failure
- Deterministic ordering with parallel fetches
- Per-job source cache
"""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from covdelta.core.errors import FetchError
from covdelta.coverage import CoverageReport, parse_coverage
from covdelta.engine import compute_baseline_coverage, split_source_lines
from covdelta.sources import DirectorySourceProvider, SourceCache

INIT_CPP = "\n".join(f"line {n}" for n in range(1, 13)) + "\n"


class FakeSources:
    """In-memory SourceFetcher recording every fetch."""

    def __init__(self, files: dict[str, str], delays: dict[str, float] | None = None) -> None:
        self.files = files
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def fetch(self, commit: str, path: str, cache: SourceCache | None = None) -> str:
        if cache is not None and path in cache:
            return cache.get(path) or ""
        with self._lock:
            self.calls.append((commit, path))
        time.sleep(self.delays.get(path, 0))
        if path not in self.files:
            raise FetchError.http_status(f"https://example.invalid/{commit}/{path}", 404)
        if cache is not None:
            cache.put(path, self.files[path])
        return self.files[path]


def _report(*files: tuple[str, dict[int, int]]) -> CoverageReport:
    report = CoverageReport(source_format="gcovr")
    for path, lines in files:
        for line_number, hits in lines.items():
            report.file(path).add_hit(line_number, hits)
    return report


class TestSplitSourceLines:
    def test_strips_carriage_returns(self) -> None:
        assert split_source_lines("a\r\nb\r\n") == ["a", "b", ""]

    def test_keeps_form_feed_inside_line(self) -> None:
        assert split_source_lines("a\x0cb\nc") == ["a\x0cb", "c"]


class TestComputeBaselineCoverage:
    """Every instrumented line of every non-excluded file."""

    def test_records_from_report(self, gcovr_sample: str) -> None:
        report = parse_coverage(gcovr_sample)
        sources = FakeSources({"src/init.cpp": INIT_CPP})

        records = compute_baseline_coverage(report, "abc123", sources, 5)

        assert [(r.file, r.line_number, r.line_text, r.covered, r.testable) for r in records] == [
            ("src/init.cpp", 10, "line 10", False, True),
            ("src/init.cpp", 11, "line 11", True, True),
        ]
        assert all(r.report_id == 5 and not r.changed for r in records)
        # src/test/ is excluded and never fetched
        assert sources.calls == [("abc123", "src/init.cpp")]

    def test_fetch_failure_skips_only_that_file(self) -> None:
        report = _report(("src/a.cpp", {1: 1}), ("src/b.cpp", {1: 0, 2: 4}))
        sources = FakeSources({"src/b.cpp": "x\ny\n"})

        records = compute_baseline_coverage(report, "abc123", sources, 1)

        assert [(r.file, r.line_number, r.line_text) for r in records] == [
            ("src/b.cpp", 1, "x"),
            ("src/b.cpp", 2, "y"),
        ]

    def test_all_fetches_failing_yields_no_records(self) -> None:
        report = _report(("src/a.cpp", {1: 1}), ("src/b.cpp", {1: 1}))

        assert compute_baseline_coverage(report, "abc123", FakeSources({}), 1) == []

    def test_line_past_end_of_source_has_empty_text(self) -> None:
        report = _report(("src/a.cpp", {1: 1, 50: 0}))

        records = compute_baseline_coverage(report, "c", FakeSources({"src/a.cpp": "only\n"}), 1)

        assert [r.line_text for r in records] == ["only", ""]

    def test_report_order_preserved(self) -> None:
        report = _report(("src/z.cpp", {9: 1, 2: 1}), ("src/a.cpp", {1: 0}))
        sources = FakeSources({"src/z.cpp": "\n" * 10, "src/a.cpp": "a\n"})

        records = compute_baseline_coverage(report, "c", sources, 1)

        assert [(r.file, r.line_number) for r in records] == [
            ("src/z.cpp", 9),
            ("src/z.cpp", 2),
            ("src/a.cpp", 1),
        ]

    def test_parallel_fetch_is_deterministic(self) -> None:
        paths = [f"src/f{n}.cpp" for n in range(6)]
        report = _report(*((p, {1: n % 2, 2: 1}) for n, p in enumerate(paths)))
        # Earlier files finish last
        delays = {p: 0.01 * (len(paths) - n) for n, p in enumerate(paths)}
        files = {p: f"{p} one\n{p} two\n" for p in paths}

        serial = compute_baseline_coverage(report, "c", FakeSources(files), 1)
        parallel = compute_baseline_coverage(
            report, "c", FakeSources(files, delays), 1, max_workers=4
        )

        assert parallel == serial
        assert [r.file for r in parallel][::2] == paths

    def test_cache_avoids_refetch(self) -> None:
        report = _report(("src/a.cpp", {1: 1}))
        sources = FakeSources({"src/a.cpp": "a\n"})
        cache = SourceCache()

        first = compute_baseline_coverage(report, "c", sources, 1, cache=cache)
        second = compute_baseline_coverage(report, "c", sources, 1, cache=cache)

        assert first == second
        assert len(sources.calls) == 1
        assert "src/a.cpp" in cache

    @pytest.mark.parametrize("max_workers", [1, 4])
    def test_empty_report(self, max_workers: int) -> None:
        report = CoverageReport(source_format="gcovr")

        assert (
            compute_baseline_coverage(report, "c", FakeSources({}), 1, max_workers=max_workers)
            == []
        )

    def test_absolute_report_path_skipped_with_local_checkout(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "a.cpp").write_text("a\n")
        report = _report(("/build/src/b.cpp", {1: 1}), ("src/a.cpp", {1: 1}))

        records = compute_baseline_coverage(report, "c", DirectorySourceProvider(tmp_path), 1)

        assert [r.file for r in records] == ["src/a.cpp"]
