"""Config module exports."""

from covdelta.config.loader import load_config
from covdelta.config.models import (
    ArtifactsConfig,
    CovDeltaConfig,
    ExclusionConfig,
    GitHubConfig,
    LoggingConfig,
    SourcesConfig,
)

__all__ = [
    "load_config",
    "ArtifactsConfig",
    "CovDeltaConfig",
    "ExclusionConfig",
    "GitHubConfig",
    "LoggingConfig",
    "SourcesConfig",
]
