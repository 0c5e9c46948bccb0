"""In-memory ReportStore."""

from __future__ import annotations

import threading

from covdelta.engine.models import CoverageLineRecord, ReportId
from covdelta.jobs.models import CoverageReportRecord


class InMemoryReportStore:
    """Keeps reports and their line records in process memory.

    Lines are keyed by (report_id, file, line_number); writing the same key
    again replaces the earlier record.
    """

    def __init__(self) -> None:
        self._reports: dict[ReportId, CoverageReportRecord] = {}
        self._lines: dict[ReportId, dict[tuple[str, int], CoverageLineRecord]] = {}
        self._lock = threading.Lock()

    def add_report(self, report: CoverageReportRecord) -> None:
        with self._lock:
            self._reports[report.id] = report

    def create_lines(self, report_id: ReportId, lines: list[CoverageLineRecord]) -> None:
        with self._lock:
            bucket = self._lines.setdefault(report_id, {})
            for line in lines:
                bucket[(line.file, line.line_number)] = line

    def get_report(self, report_id: ReportId) -> CoverageReportRecord | None:
        with self._lock:
            return self._reports.get(report_id)

    def update_report(self, report: CoverageReportRecord) -> None:
        with self._lock:
            self._reports[report.id] = report

    def lines(self, report_id: ReportId) -> list[CoverageLineRecord]:
        with self._lock:
            return list(self._lines.get(report_id, {}).values())
