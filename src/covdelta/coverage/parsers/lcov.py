"""LCOV format parser.

LCOV tracefiles are plain text with records like:
- TN:<test name>
- SF:<source file path>
- DA:<line>,<hit count>[,<checksum>]
- LF:<lines found> / LH:<lines hit>
- end_of_record

Only line records (DA) matter for line classification; branch and function
records are accepted and ignored.

Used by: lcov/geninfo, cargo-llvm-cov, pytest-cov, c8
"""

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import CoverageReport, FileCoverage

from .base import check_hit, head

_KNOWN_PREFIXES = (
    "TN:",
    "SF:",
    "DA:",
    "FN:",
    "FNDA:",
    "FNF:",
    "FNH:",
    "FNL:",
    "FNA:",
    "BRDA:",
    "BRF:",
    "BRH:",
    "LF:",
    "LH:",
    "VER:",
)


class LcovParser:
    """Parser for LCOV tracefiles."""

    @property
    def format_id(self) -> str:
        return "lcov"

    def can_parse(self, content: str) -> bool:
        for line in head(content).splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            return stripped.startswith(("TN:", "SF:"))
        return False

    def parse(self, content: str) -> CoverageReport:
        report = CoverageReport(source_format="lcov")
        current: FileCoverage | None = None

        for line_no, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("SF:"):
                path = line[3:]
                if not path:
                    raise CoverageParseError.malformed("lcov", f"empty SF path at line {line_no}")
                current = report.file(path)

            elif line.startswith("DA:"):
                if current is None:
                    raise CoverageParseError.malformed(
                        "lcov", f"DA record outside a file section at line {line_no}"
                    )
                parts = line[3:].split(",")
                if len(parts) < 2:
                    raise CoverageParseError.malformed("lcov", f"short DA record at line {line_no}")
                try:
                    line_number = int(parts[0])
                    # Some tools write '-' for a line that was never executed
                    hits = 0 if parts[1] == "-" else int(parts[1])
                except ValueError as e:
                    raise CoverageParseError.malformed(
                        "lcov", f"non-numeric DA record at line {line_no}"
                    ) from e
                current.add_hit(*check_hit("lcov", current.path, line_number, hits))

            elif line == "end_of_record":
                current = None

            elif not line.startswith(_KNOWN_PREFIXES):
                raise CoverageParseError.malformed(
                    "lcov", f"unrecognized record at line {line_no}: {line[:40]!r}"
                )

        return report
