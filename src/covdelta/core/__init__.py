"""Core module exports."""

from covdelta.core.errors import (
    ConfigError,
    CovDeltaError,
    CoverageParseError,
    DiffParseError,
    ErrorCode,
    FetchError,
    InternalError,
    ParseError,
)
from covdelta.core.excludes import DEFAULT_POLICY, ExclusionPolicy, is_excluded
from covdelta.core.logging import (
    clear_job_id,
    configure_logging,
    get_job_id,
    get_logger,
    set_job_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CovDeltaError",
    "CoverageParseError",
    "DiffParseError",
    "ErrorCode",
    "FetchError",
    "InternalError",
    "ParseError",
    # Exclusion
    "DEFAULT_POLICY",
    "ExclusionPolicy",
    "is_excluded",
    # Logging
    "clear_job_id",
    "configure_logging",
    "get_job_id",
    "get_logger",
    "set_job_id",
]
