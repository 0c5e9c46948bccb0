"""Coverage parser registry and auto-detection.

This module provides:
- PARSER_REGISTRY: All available parsers
- detect_parser: Auto-detect format from artifact content
- parse_coverage: Parse raw artifact text or bytes
- parse_artifact: Convenience wrapper reading a file
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import CoverageReport

from .base import CoverageParser
from .cobertura import CoberturaParser
from .gcovr import GcovrParser
from .lcov import LcovParser

log = structlog.get_logger()

# Parser registry - order matters for detection priority
PARSER_REGISTRY: Sequence[CoverageParser] = (
    GcovrParser(),  # JSON object
    CoberturaParser(),  # <coverage line-rate=...> XML
    LcovParser(),  # LCOV text (last text fallback)
)

# Format ID to parser mapping
PARSER_BY_FORMAT: dict[str, CoverageParser] = {p.format_id: p for p in PARSER_REGISTRY}

__all__ = [
    "PARSER_REGISTRY",
    "PARSER_BY_FORMAT",
    "detect_parser",
    "parse_artifact",
    "parse_coverage",
    "CoverageParser",
    "CoberturaParser",
    "GcovrParser",
    "LcovParser",
]


def detect_parser(content: str) -> CoverageParser | None:
    """Return the first registered parser that claims the content."""
    for parser in PARSER_REGISTRY:
        if parser.can_parse(content):
            return parser
    return None


def parse_coverage(raw: str | bytes, *, format_id: str | None = None) -> CoverageReport:
    """Parse a raw coverage artifact into a unified CoverageReport.

    Args:
        raw: Artifact text, or UTF-8 bytes.
        format_id: Force specific format (skip auto-detection).

    Returns:
        Parsed CoverageReport.

    Raises:
        CoverageParseError: If format unknown or parsing fails.
    """
    if isinstance(raw, bytes):
        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CoverageParseError.malformed("artifact", f"not valid UTF-8: {e}") from e
    else:
        content = raw.removeprefix("\ufeff")

    if format_id:
        parser = PARSER_BY_FORMAT.get(format_id)
        if not parser:
            valid = ", ".join(sorted(PARSER_BY_FORMAT.keys()))
            raise CoverageParseError.unknown_format(
                f"Unknown coverage format: {format_id!r}. Valid formats: {valid}",
                format=format_id,
            )
    else:
        parser = detect_parser(content)
        if not parser:
            raise CoverageParseError.unknown_format(
                "Could not detect coverage format. Supported formats: gcovr, cobertura, lcov"
            )

    report = parser.parse(content)
    summary = report.summary
    log.debug(
        "coverage.parsed",
        format=report.source_format,
        files=summary.files,
        lines_found=summary.lines_found,
        lines_hit=summary.lines_hit,
        line_rate=round(summary.line_rate, 4),
    )
    return report


def parse_artifact(path: Path, *, format_id: str | None = None) -> CoverageReport:
    """Read a coverage artifact from disk and parse it.

    Raises:
        CoverageParseError: If the file cannot be read or parsed.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CoverageParseError.malformed("artifact", f"cannot read {path}: {e}") from e
    return parse_coverage(raw, format_id=format_id)
