"""Coverage ratio aggregation."""

from collections.abc import Iterable

from covdelta.engine.models import CoverageLineRecord


def compute_coverage_ratio(
    records: Iterable[CoverageLineRecord], restrict_to_changed: bool
) -> float | None:
    """Fraction of eligible records that are covered.

    Eligible records are the testable ones, further restricted to changed
    lines when ``restrict_to_changed`` is set (pull request reports). The
    caller picks the flag from the report's own mode.

    Returns:
        Ratio in [0, 1], or None when no record is eligible.
    """
    considered = 0
    covered = 0
    for record in records:
        if not record.testable:
            continue
        if restrict_to_changed and not record.changed:
            continue
        considered += 1
        if record.covered:
            covered += 1

    if considered == 0:
        return None
    return covered / considered
