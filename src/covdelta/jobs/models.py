"""Job and report models exchanged with the persistence layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from covdelta.engine.models import CoverageLineRecord, ReportId


class CoverageReportStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True, slots=True)
class Job:
    """A finished coverage run to be accounted.

    ``is_master`` selects baseline mode; otherwise ``pull_request_number``
    is required and differential mode runs.
    """

    commit: str
    coverage_report_id: ReportId
    is_master: bool = False
    pull_request_number: int | None = None


@dataclass(slots=True)
class CoverageReportRecord:
    """Persisted coverage report row."""

    id: ReportId
    is_master: bool
    status: CoverageReportStatus = CoverageReportStatus.PENDING
    coverage_ratio: float | None = None
    base_commit: str | None = None


class ReportStore(Protocol):
    def create_lines(self, report_id: ReportId, lines: list[CoverageLineRecord]) -> None: ...

    def get_report(self, report_id: ReportId) -> CoverageReportRecord | None: ...

    def update_report(self, report: CoverageReportRecord) -> None: ...


class CoverageArtifactSource(Protocol):
    def get_pull_coverage(self, pull_number: int, commit: str) -> str | bytes: ...

    def get_master_coverage(self, commit: str) -> str | bytes: ...


class PullRequestSource(Protocol):
    def get_pull_diff(self, pull_number: int) -> str: ...

    def get_base_commit(self, pull_number: int, commit: str) -> str: ...
