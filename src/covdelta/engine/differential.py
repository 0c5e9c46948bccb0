"""Differential (pull request) coverage.

Only lines in the new-file range of a hunk are visited: ADDED and UNCHANGED
context lines. Files the diff does not touch never produce records.
"""

from __future__ import annotations

import structlog

from covdelta.core.excludes import DEFAULT_POLICY, ExclusionPolicy
from covdelta.coverage.models import CoverageReport
from covdelta.diff.models import Diff, LineMode
from covdelta.engine.classify import classify_line
from covdelta.engine.models import CoverageLineRecord, ReportId

log = structlog.get_logger()


def compute_diff_coverage(
    report: CoverageReport,
    diff: Diff,
    report_id: ReportId,
    *,
    policy: ExclusionPolicy = DEFAULT_POLICY,
) -> list[CoverageLineRecord]:
    """Classify every new-range line of every non-excluded file in the diff.

    Records come out in diff order: file, then hunk, then line. Nothing is
    reordered or deduplicated.
    """
    records: list[CoverageLineRecord] = []
    excluded = 0

    for file_diff in diff.files:
        path = file_diff.new_path
        if policy.is_excluded(path):
            excluded += 1
            continue

        for hunk in file_diff.hunks:
            for line in hunk.new_range_lines:
                status = classify_line(report, path, line.number)
                records.append(
                    CoverageLineRecord(
                        report_id=report_id,
                        file=path,
                        line_number=line.number,
                        line_text=line.content,
                        covered=status.covered,
                        testable=status.testable,
                        changed=line.mode is LineMode.ADDED,
                    )
                )

    log.debug(
        "differential.computed",
        files=len(diff.files),
        excluded=excluded,
        records=len(records),
    )
    return records
