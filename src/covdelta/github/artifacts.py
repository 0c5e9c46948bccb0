"""Download raw coverage artifacts produced by CI."""

from __future__ import annotations

import httpx
import structlog

from covdelta.config.models import ArtifactsConfig
from covdelta.core.errors import ConfigError
from covdelta.core.http import get_checked

log = structlog.get_logger()


class HttpArtifactSource:
    """Fetch coverage artifacts from URL templates.

    ``pull_url_template`` may use {pull_number} and {commit};
    ``master_url_template`` may use {commit}.
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        pull_url_template: str | None,
        master_url_template: str | None,
    ) -> None:
        self._client = client
        self.pull_url_template = pull_url_template
        self.master_url_template = master_url_template

    @classmethod
    def from_config(cls, config: ArtifactsConfig) -> HttpArtifactSource:
        client = httpx.Client(timeout=config.timeout_sec, follow_redirects=True)
        return cls(
            client,
            pull_url_template=config.pull_url_template,
            master_url_template=config.master_url_template,
        )

    def get_pull_coverage(self, pull_number: int, commit: str) -> bytes:
        if not self.pull_url_template:
            raise ConfigError.invalid_value(
                "artifacts.pull_url_template", None, "not configured"
            )
        url = self.pull_url_template.format(pull_number=pull_number, commit=commit)
        log.debug("artifacts.get_pull_coverage", pull=pull_number, commit=commit)
        return get_checked(self._client, url).content

    def get_master_coverage(self, commit: str) -> bytes:
        if not self.master_url_template:
            raise ConfigError.invalid_value(
                "artifacts.master_url_template", None, "not configured"
            )
        url = self.master_url_template.format(commit=commit)
        log.debug("artifacts.get_master_coverage", commit=commit)
        return get_checked(self._client, url).content

    def close(self) -> None:
        self._client.close()
