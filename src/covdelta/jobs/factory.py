"""Wire a CoverageJobHandler from configuration."""

from covdelta.config.models import CovDeltaConfig
from covdelta.github.artifacts import HttpArtifactSource
from covdelta.github.client import GitHubClient
from covdelta.jobs.handler import CoverageJobHandler
from covdelta.jobs.models import ReportStore
from covdelta.sources.provider import SourceTextProvider


def build_job_handler(config: CovDeltaConfig, store: ReportStore) -> CoverageJobHandler:
    """Handler backed by GitHub, HTTP artifact downloads, and raw source fetches."""
    return CoverageJobHandler(
        store=store,
        artifacts=HttpArtifactSource.from_config(config.artifacts),
        pulls=GitHubClient.from_config(config.github),
        sources=SourceTextProvider.from_config(config.sources),
        policy=config.exclusion.to_policy(),
        max_workers=config.sources.max_workers,
        artifact_format=config.artifacts.format,
    )
