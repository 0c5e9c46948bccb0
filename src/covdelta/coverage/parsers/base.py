"""Coverage parser protocol and shared validation."""

from typing import Protocol

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import CoverageReport


class CoverageParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one coverage format and converts raw artifact text
    to the unified CoverageReport model.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'gcovr', 'lcov')."""
        ...

    def can_parse(self, content: str) -> bool:
        """Content-sniff whether this parser handles the artifact."""
        ...

    def parse(self, content: str) -> CoverageReport:
        """Parse artifact text into the unified model.

        Raises:
            CoverageParseError: If the artifact is malformed.
        """
        ...


def check_hit(fmt: str, path: str, line_number: object, hit_count: object) -> tuple[int, int]:
    """Validate one (line, count) pair and return it as ints."""
    # bool is an int subclass; reject it explicitly
    if not isinstance(line_number, int) or isinstance(line_number, bool) or line_number < 1:
        raise CoverageParseError.malformed(
            fmt, f"invalid line number {line_number!r} in {path}", path=path
        )
    if not isinstance(hit_count, int) or isinstance(hit_count, bool) or hit_count < 0:
        raise CoverageParseError.malformed(
            fmt, f"invalid hit count {hit_count!r} at {path}:{line_number}", path=path
        )
    return line_number, hit_count


def head(content: str, size: int = 2048) -> str:
    """Leading chunk of an artifact, for content sniffing."""
    return content[:size].lstrip("\ufeff \t\r\n")
