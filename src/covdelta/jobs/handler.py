"""Coverage job handling.

Runs when CI reports a coverage job as finished. On success the job's
artifact is classified line by line, the lines are persisted, and the report
gets its ratio, status and base commit. On failure the report is only marked
failed.

Parse errors and artifact/diff/base-commit fetch errors propagate to the
caller before anything is persisted; the caller is expected to follow up
with handle_failure().
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from covdelta.core.errors import InternalError
from covdelta.core.excludes import DEFAULT_POLICY, ExclusionPolicy
from covdelta.core.logging import clear_job_id, set_job_id
from covdelta.coverage.models import CoverageReport
from covdelta.coverage.parsers import parse_coverage
from covdelta.diff.parser import parse_diff
from covdelta.engine.baseline import compute_baseline_coverage
from covdelta.engine.differential import compute_diff_coverage
from covdelta.engine.models import CoverageRunResult
from covdelta.engine.ratio import compute_coverage_ratio
from covdelta.jobs.models import (
    CoverageArtifactSource,
    CoverageReportRecord,
    CoverageReportStatus,
    Job,
    PullRequestSource,
    ReportStore,
)
from covdelta.sources.provider import SourceCache, SourceFetcher

log = structlog.get_logger()


@dataclass
class CoverageJobHandler:
    store: ReportStore
    artifacts: CoverageArtifactSource
    pulls: PullRequestSource
    sources: SourceFetcher
    policy: ExclusionPolicy = DEFAULT_POLICY
    max_workers: int = 1
    artifact_format: str | None = None

    def compute(self, job: Job) -> CoverageRunResult:
        """Classify the job's lines without persisting anything."""
        if job.is_master:
            log.debug("job.master_coverage", commit=job.commit)
            report = self._parse(self.artifacts.get_master_coverage(job.commit))
            # One cache per job: every fetch below targets job.commit
            records = compute_baseline_coverage(
                report,
                job.commit,
                self.sources,
                job.coverage_report_id,
                policy=self.policy,
                cache=SourceCache(),
                max_workers=self.max_workers,
            )
            return CoverageRunResult(records=records, base_commit=job.commit)

        pull_number = job.pull_request_number
        if pull_number is None:
            raise InternalError.unexpected(
                "pull request job without a pull request number",
                report_id=job.coverage_report_id,
            )

        log.debug("job.pull_coverage", pull=pull_number, commit=job.commit)
        report = self._parse(self.artifacts.get_pull_coverage(pull_number, job.commit))
        diff = parse_diff(self.pulls.get_pull_diff(pull_number))
        records = compute_diff_coverage(
            report, diff, job.coverage_report_id, policy=self.policy
        )
        base_commit = self.pulls.get_base_commit(pull_number, job.commit)
        return CoverageRunResult(records=records, base_commit=base_commit)

    def handle_success(self, job: Job) -> CoverageRunResult:
        set_job_id(str(job.coverage_report_id))
        try:
            log.info("job.coverage_success", pull=job.pull_request_number, master=job.is_master)
            result = self.compute(job)
            report = self._get_report(job)

            self.store.create_lines(job.coverage_report_id, result.records)

            # Denominator follows the report's own mode flag
            result.ratio = compute_coverage_ratio(
                result.records, restrict_to_changed=not report.is_master
            )
            report.coverage_ratio = result.ratio
            report.status = CoverageReportStatus.SUCCESS
            report.base_commit = result.base_commit
            self.store.update_report(report)

            log.info(
                "job.coverage_updated",
                records=len(result.records),
                ratio=result.ratio,
                base_commit=result.base_commit,
            )
            return result
        finally:
            clear_job_id()

    def handle_failure(self, job: Job) -> None:
        set_job_id(str(job.coverage_report_id))
        try:
            log.info("job.coverage_failure", pull=job.pull_request_number, master=job.is_master)
            report = self._get_report(job)
            report.status = CoverageReportStatus.FAILURE
            self.store.update_report(report)
        finally:
            clear_job_id()

    def close(self) -> None:
        """Close the collaborators that hold network clients."""
        for resource in (self.artifacts, self.pulls, self.sources):
            close = getattr(resource, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> CoverageJobHandler:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _get_report(self, job: Job) -> CoverageReportRecord:
        report = self.store.get_report(job.coverage_report_id)
        if report is None:
            raise InternalError.unexpected(
                "coverage report not found", report_id=job.coverage_report_id
            )
        return report

    def _parse(self, raw: str | bytes) -> CoverageReport:
        return parse_coverage(raw, format_id=self.artifact_format)
