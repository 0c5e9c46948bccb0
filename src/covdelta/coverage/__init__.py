"""Coverage report model and artifact parsing.

Usage:
    from covdelta.coverage import parse_coverage, find_line

    report = parse_coverage(raw_bytes)
    hit = find_line(report, "src/init.cpp", 42)

Supported formats:
    - gcovr: gcovr JSON (gcc/clang C and C++ builds)
    - cobertura: Cobertura XML
    - lcov: LCOV tracefiles
"""

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import (
    CoverageReport,
    CoverageSummary,
    FileCoverage,
    LineHit,
    find_line,
)
from covdelta.coverage.parsers import (
    PARSER_BY_FORMAT,
    PARSER_REGISTRY,
    CoverageParser,
    detect_parser,
    parse_artifact,
    parse_coverage,
)

__all__ = [
    # Models
    "CoverageParseError",
    "CoverageReport",
    "CoverageSummary",
    "FileCoverage",
    "LineHit",
    "find_line",
    # Parsers
    "CoverageParser",
    "PARSER_BY_FORMAT",
    "PARSER_REGISTRY",
    "detect_parser",
    "parse_artifact",
    "parse_coverage",
]
