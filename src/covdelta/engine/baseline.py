"""Baseline (trunk commit) coverage.

Traverses the coverage report rather than a diff: every instrumented line of
every non-excluded file yields a record. Line text is recovered from the
file's source at the commit. A file whose source cannot be fetched is
skipped and the run continues.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import structlog

from covdelta.core.errors import FetchError
from covdelta.core.excludes import DEFAULT_POLICY, ExclusionPolicy
from covdelta.coverage.models import CoverageReport, FileCoverage
from covdelta.engine.classify import classify_line
from covdelta.engine.models import CoverageLineRecord, ReportId
from covdelta.sources.provider import SourceCache, SourceFetcher

log = structlog.get_logger()


def split_source_lines(text: str) -> list[str]:
    """Split file text into lines; index ``n - 1`` holds line ``n``."""
    return [line.removesuffix("\r") for line in text.split("\n")]


def compute_baseline_coverage(
    report: CoverageReport,
    commit: str,
    provider: SourceFetcher,
    report_id: ReportId,
    *,
    policy: ExclusionPolicy = DEFAULT_POLICY,
    cache: SourceCache | None = None,
    max_workers: int = 1,
) -> list[CoverageLineRecord]:
    """Classify every instrumented line of every non-excluded file.

    Args:
        report: Parsed coverage report for ``commit``.
        commit: Revision the report was produced from.
        provider: Source text fetcher.
        report_id: Identifier stamped on every record.
        policy: Exclusion policy.
        cache: Optional per-job cache. Keyed by path only, so it must not be
            shared with a job for another commit.
        max_workers: Parallel fetches. Output order is report order
            regardless.

    Returns:
        Records in report file order, then report line order.
    """
    files = [fc for fc in report.files.values() if not policy.is_excluded(fc.path)]

    def fetch(file_cov: FileCoverage) -> str | None:
        try:
            return provider.fetch(commit, file_cov.path, cache)
        except FetchError as e:
            log.warning(
                "baseline.fetch_failed",
                path=file_cov.path,
                commit=commit,
                error=e.error_name,
                message=e.message,
            )
            return None

    if max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="covdelta-fetch"
        ) as executor:
            # map() yields in submission order
            texts = list(executor.map(fetch, files))
    else:
        texts = [fetch(fc) for fc in files]

    records: list[CoverageLineRecord] = []
    skipped = 0
    for file_cov, text in zip(files, texts, strict=True):
        if text is None:
            skipped += 1
            continue
        records.extend(_file_records(report, file_cov, split_source_lines(text), report_id))

    log.info(
        "baseline.computed",
        commit=commit,
        files=len(files),
        skipped=skipped,
        records=len(records),
    )
    if files and skipped == len(files):
        log.warning("baseline.all_fetches_failed", commit=commit, files=len(files))
    return records


def _file_records(
    report: CoverageReport,
    file_cov: FileCoverage,
    source_lines: list[str],
    report_id: ReportId,
) -> list[CoverageLineRecord]:
    records = []
    for hit in file_cov.hits:
        if hit.line_number <= len(source_lines):
            line_text = source_lines[hit.line_number - 1]
        else:
            log.debug(
                "baseline.line_out_of_range",
                path=file_cov.path,
                line=hit.line_number,
                source_lines=len(source_lines),
            )
            line_text = ""
        status = classify_line(report, file_cov.path, hit.line_number)
        records.append(
            CoverageLineRecord(
                report_id=report_id,
                file=file_cov.path,
                line_number=hit.line_number,
                line_text=line_text,
                covered=status.covered,
                testable=status.testable,
                changed=False,
            )
        )
    return records
