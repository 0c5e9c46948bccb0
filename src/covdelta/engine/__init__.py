"""Coverage differential engine.

Two independent computers share the line classifier and exclusion policy:

- compute_diff_coverage: lines touched by a pull request diff
- compute_baseline_coverage: every instrumented line at a trunk commit

compute_coverage_ratio reduces either output to a single ratio.
"""

from covdelta.engine.baseline import compute_baseline_coverage, split_source_lines
from covdelta.engine.classify import classify_line
from covdelta.engine.differential import compute_diff_coverage
from covdelta.engine.models import (
    NOT_TESTABLE,
    CoverageLineRecord,
    CoverageRunResult,
    LineStatus,
    ReportId,
)
from covdelta.engine.ratio import compute_coverage_ratio

__all__ = [
    "NOT_TESTABLE",
    "CoverageLineRecord",
    "CoverageRunResult",
    "LineStatus",
    "ReportId",
    "classify_line",
    "compute_baseline_coverage",
    "compute_coverage_ratio",
    "compute_diff_coverage",
    "split_source_lines",
]
