"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVDELTA__SECTION__KEY)
3. Repo YAML (.covdelta.yaml)
4. Global YAML (~/.config/covdelta/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVDELTA__<SECTION>__<KEY>=<VALUE>

Examples:
    COVDELTA__LOGGING__LEVEL=DEBUG
    COVDELTA__SOURCES__MAX_WORKERS=8
    COVDELTA__GITHUB__TOKEN=ghp_...
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from covdelta.core.excludes import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_EXCLUDED_DIRS,
    ExclusionPolicy,
)

def _check_url_template(template: str, *placeholders: str) -> str:
    """Format a URL template with dummy values so bad placeholders fail at load time."""
    try:
        template.format(**{name: "x" for name in placeholders})
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise ValueError(
            f"URL template {template!r} is invalid ({type(e).__name__}: {e}); "
            f"allowed placeholders: {', '.join('{' + p + '}' for p in placeholders)}"
        ) from e
    return template


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVDELTA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every source fetch.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExclusionConfig(BaseModel):
    """Which files count toward coverage.

    Static for the lifetime of the process; not derived from job input.
    """

    excluded_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS),
        description="Path prefixes excluded outright, regardless of extension.",
    )
    allowed_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS),
        description="Path suffixes that are counted. Everything else is excluded.",
    )

    def to_policy(self) -> ExclusionPolicy:
        return ExclusionPolicy.from_lists(self.excluded_dirs, self.allowed_extensions)


class SourcesConfig(BaseModel):
    """Historical source text retrieval (baseline mode only).

    Env vars:
        COVDELTA__SOURCES__REPOSITORY: owner/name of the repository
        COVDELTA__SOURCES__TIMEOUT_SEC: Per-request timeout
        COVDELTA__SOURCES__MAX_WORKERS: Parallel fetch workers
    """

    repository: str = Field(
        default="bitcoin/bitcoin",
        description="Repository (owner/name) whose files are fetched.",
    )
    raw_url_template: str = Field(
        default="https://raw.githubusercontent.com/{repository}/{commit}/{path}",
        description="URL template for raw file text. "
        "Placeholders: {repository}, {commit}, {path}.",
    )
    timeout_sec: float = Field(
        default=30.0,
        description="Per-request timeout. A timed-out fetch skips that file.",
    )
    max_workers: int = Field(
        default=8,
        description="Parallel source fetches per baseline job. 1 disables parallelism.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("raw_url_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        for placeholder in ("{commit}", "{path}"):
            if placeholder not in v:
                raise ValueError(f"raw_url_template must contain {placeholder}")
        return _check_url_template(v, "repository", "commit", "path")


class GitHubConfig(BaseModel):
    """GitHub REST API access for pull request diffs and base commits.

    Env vars:
        COVDELTA__GITHUB__TOKEN: Access token (optional for public repos)
        COVDELTA__GITHUB__REPOSITORY: owner/name
    """

    api_url: str = Field(default="https://api.github.com")
    repository: str = Field(default="bitcoin/bitcoin")
    token: str | None = Field(
        default=None,
        description="Access token. SECURITY: prefer the env var over YAML.",
    )
    timeout_sec: float = Field(default=30.0)


class ArtifactsConfig(BaseModel):
    """Where raw coverage artifacts are downloaded from.

    Placeholders: {pull_number} and {commit} for pull requests, {commit}
    for master.
    """

    pull_url_template: str | None = Field(
        default=None,
        description="URL template for pull request coverage artifacts.",
    )
    master_url_template: str | None = Field(
        default=None,
        description="URL template for master commit coverage artifacts.",
    )
    format: str | None = Field(
        default=None,
        description="Force an artifact format (gcovr, cobertura, lcov). Auto-detected if unset.",
    )
    timeout_sec: float = Field(default=60.0)

    @field_validator("pull_url_template")
    @classmethod
    def validate_pull_template(cls, v: str | None) -> str | None:
        return None if v is None else _check_url_template(v, "pull_number", "commit")

    @field_validator("master_url_template")
    @classmethod
    def validate_master_template(cls, v: str | None) -> str | None:
        return None if v is None else _check_url_template(v, "commit")


class CovDeltaConfig(BaseModel):
    """Root configuration for covdelta.

    All settings can be configured via:
    1. Environment variables: COVDELTA__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    exclusion: ExclusionConfig = Field(default_factory=ExclusionConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
