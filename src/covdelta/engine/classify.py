"""Line classification against a coverage report."""

from covdelta.coverage.models import CoverageReport
from covdelta.engine.models import NOT_TESTABLE, LineStatus


def classify_line(report: CoverageReport, file: str, line_number: int) -> LineStatus:
    """Classify one line as covered and/or testable.

    Lookup is two-level. A file missing from the report and a line the tool
    never instrumented (comment, brace, blank) both come back not testable;
    neither is an error.
    """
    file_cov = report.files.get(file)
    if file_cov is None:
        return NOT_TESTABLE
    hit_count = file_cov.lines.get(line_number)
    if hit_count is None:
        return NOT_TESTABLE
    return LineStatus(covered=hit_count > 0, testable=True)
