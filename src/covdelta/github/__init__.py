"""Remote adapters: GitHub pull requests and CI coverage artifacts."""

from covdelta.github.artifacts import HttpArtifactSource
from covdelta.github.client import GitHubClient

__all__ = ["GitHubClient", "HttpArtifactSource"]
