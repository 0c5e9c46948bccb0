"""Records produced by the coverage computers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

ReportId = int | str


@dataclass(frozen=True, slots=True)
class LineStatus:
    """Classification of one line against a coverage report."""

    covered: bool
    testable: bool


NOT_TESTABLE = LineStatus(covered=False, testable=False)


@dataclass(frozen=True, slots=True)
class CoverageLineRecord:
    """One classified line, stored externally keyed by (report_id, file, line_number).

    ``changed`` is only ever true in differential mode, for lines the diff adds.
    """

    report_id: ReportId
    file: str
    line_number: int
    line_text: str
    covered: bool
    testable: bool
    changed: bool

    def __post_init__(self) -> None:
        if self.covered and not self.testable:
            raise ValueError(f"{self.file}:{self.line_number} is covered but not testable")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CoverageRunResult:
    """Everything one job run hands to persistence."""

    records: list[CoverageLineRecord] = field(default_factory=list)
    ratio: float | None = None
    base_commit: str | None = None
