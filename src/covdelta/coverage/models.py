"""Unified coverage data model.

File-centric model for coverage data: every artifact format converts to
this representation. Both levels are dicts, so the file → line index is
built once while parsing and each lookup is O(1).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class LineHit:
    """Execution count for one instrumented line (1-based)."""

    line_number: int
    hit_count: int


@dataclass(slots=True)
class FileCoverage:
    """Coverage data for a single file.

    Lines are stored as a dict mapping line number → hit count, in the order
    the artifact lists them. Line numbers are 1-based and unique per file.
    """

    path: str  # exactly as spelled in the artifact
    lines: dict[int, int] = field(default_factory=dict)  # line_number → hit_count

    def add_hit(self, line_number: int, hit_count: int) -> None:
        """Record a hit count, keeping the max if the line is already present."""
        previous = self.lines.get(line_number)
        if previous is None or hit_count > previous:
            self.lines[line_number] = hit_count

    @property
    def hits(self) -> Iterator[LineHit]:
        for line_number, hit_count in self.lines.items():
            yield LineHit(line_number, hit_count)

    @property
    def lines_found(self) -> int:
        """Total number of instrumented lines."""
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        """Number of lines with at least one hit."""
        return sum(1 for hits in self.lines.values() if hits > 0)


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate line statistics computed from a CoverageReport."""

    files: int
    lines_found: int
    lines_hit: int
    line_rate: float


@dataclass(slots=True)
class CoverageReport:
    """Complete coverage report parsed from one artifact.

    Files are keyed by path in artifact order. Path equality is exact: no
    normalization, case-sensitive, matching how diffs name files.
    """

    source_format: str  # format id (e.g., "gcovr", "lcov")
    files: dict[str, FileCoverage] = field(default_factory=dict)  # path → coverage

    def file(self, path: str) -> FileCoverage:
        """Get or create the entry for a path."""
        fc = self.files.get(path)
        if fc is None:
            fc = self.files[path] = FileCoverage(path=path)
        return fc

    def find_line(self, path: str, line_number: int) -> LineHit | None:
        fc = self.files.get(path)
        if fc is None:
            return None
        hit_count = fc.lines.get(line_number)
        if hit_count is None:
            return None
        return LineHit(line_number, hit_count)

    @property
    def summary(self) -> CoverageSummary:
        lines_found = sum(f.lines_found for f in self.files.values())
        lines_hit = sum(f.lines_hit for f in self.files.values())
        return CoverageSummary(
            files=len(self.files),
            lines_found=lines_found,
            lines_hit=lines_hit,
            line_rate=lines_hit / lines_found if lines_found > 0 else 0.0,
        )


def find_line(report: CoverageReport, path: str, line_number: int) -> LineHit | None:
    """Look up the hit record for a line, or None if the file or line is absent."""
    return report.find_line(path, line_number)
