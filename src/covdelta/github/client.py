"""GitHub REST client for pull request diffs and base commits."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from covdelta.config.models import GitHubConfig
from covdelta.core.errors import FetchError
from covdelta.core.http import get_checked, json_body

log = structlog.get_logger()

_DIFF_MEDIA_TYPE = "application/vnd.github.diff"


class GitHubClient:
    """Read-only access to one repository's pull requests."""

    def __init__(self, client: httpx.Client, repository: str) -> None:
        self._client = client
        self.repository = repository

    @classmethod
    def from_config(cls, config: GitHubConfig) -> GitHubClient:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        client = httpx.Client(
            base_url=config.api_url,
            headers=headers,
            timeout=config.timeout_sec,
            follow_redirects=True,
        )
        return cls(client, config.repository)

    def get_pull_diff(self, pull_number: int) -> str:
        """Unified diff of a pull request against its base branch."""
        log.debug("github.get_pull_diff", pull=pull_number)
        response = get_checked(
            self._client,
            f"/repos/{self.repository}/pulls/{pull_number}",
            headers={"Accept": _DIFF_MEDIA_TYPE},
        )
        return response.text

    def get_pull(self, pull_number: int) -> dict[str, Any]:
        response = get_checked(self._client, f"/repos/{self.repository}/pulls/{pull_number}")
        data = json_body(response)
        if not isinstance(data, dict):
            raise FetchError.decode(str(response.request.url), "expected a JSON object")
        return data

    def get_base_commit(self, pull_number: int, commit: str) -> str:
        """Merge base of ``commit`` and the pull request's base branch."""
        pull = self.get_pull(pull_number)
        try:
            base_ref = pull["base"]["ref"]
        except (KeyError, TypeError) as e:
            raise FetchError.decode(f"pulls/{pull_number}", "missing base.ref") from e

        url = f"/repos/{self.repository}/compare/{base_ref}...{commit}"
        data = json_body(get_checked(self._client, url))
        try:
            sha = data["merge_base_commit"]["sha"]
        except (KeyError, TypeError) as e:
            raise FetchError.decode(url, "missing merge_base_commit.sha") from e
        log.debug("github.base_commit", pull=pull_number, commit=commit, base=sha)
        return str(sha)

    def close(self) -> None:
        self._client.close()
