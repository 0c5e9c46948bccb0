"""covdelta error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse (coverage artifacts, diffs)
- 4xxx: Fetch (source text, artifacts, GitHub)
- 9xxx: Internal

Parse errors are fatal to a coverage job. Fetch errors are per-file and
non-fatal while computing baseline coverage.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Parse (3xxx)
    COVERAGE_PARSE_ERROR = 3001
    COVERAGE_UNKNOWN_FORMAT = 3002
    DIFF_PARSE_ERROR = 3101

    # Fetch (4xxx)
    FETCH_HTTP_STATUS = 4001
    FETCH_TRANSPORT = 4002
    FETCH_DECODE = 4003
    FETCH_INVALID_PATH = 4004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(eq=False)
class CovDeltaError(Exception):
    """Base error with structured context for logs and report updates."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'DIFF_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovDeltaError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ParseError(CovDeltaError):
    """Malformed coverage artifact or diff. Fatal to the current job."""


class CoverageParseError(ParseError):
    """Error parsing coverage data."""

    @classmethod
    def malformed(cls, fmt: str, reason: str, **details: Any) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Invalid {fmt} coverage data: {reason}",
            details={"format": fmt, **details},
        )

    @classmethod
    def unknown_format(cls, reason: str, **details: Any) -> "CoverageParseError":
        return cls(
            code=ErrorCode.COVERAGE_UNKNOWN_FORMAT,
            message=reason,
            details=details,
        )


class DiffParseError(ParseError):
    """Error parsing a unified diff."""

    @classmethod
    def at_line(cls, line_no: int, reason: str, line: str = "") -> "DiffParseError":
        return cls(
            code=ErrorCode.DIFF_PARSE_ERROR,
            message=f"line {line_no}: {reason}",
            details={"line_no": line_no, "line": line[:200]},
        )


class FetchError(CovDeltaError):
    """Network or decode failure while retrieving remote content."""

    @classmethod
    def http_status(cls, url: str, status_code: int) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_HTTP_STATUS,
            message=f"GET {url} returned HTTP {status_code}",
            retryable=status_code >= 500 or status_code == 429,
            details={"url": url, "status_code": status_code},
        )

    @classmethod
    def transport(cls, url: str, reason: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_TRANSPORT,
            message=f"GET {url} failed: {reason}",
            retryable=True,
            details={"url": url, "reason": reason},
        )

    @classmethod
    def decode(cls, url: str, reason: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_DECODE,
            message=f"Could not decode response from {url}: {reason}",
            details={"url": url, "reason": reason},
        )

    @classmethod
    def invalid_path(cls, path: str, reason: str) -> "FetchError":
        return cls(
            code=ErrorCode.FETCH_INVALID_PATH,
            message=f"Refusing to read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(CovDeltaError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
