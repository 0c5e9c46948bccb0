"""Historical source text retrieval.

Baseline coverage records carry the literal text of every instrumented line,
which the coverage artifact does not contain. The text is fetched per file
at the job's commit from a raw-content endpoint.
"""

from __future__ import annotations

import threading
from typing import Protocol
from urllib.parse import quote

import httpx
import structlog

from covdelta.config.models import SourcesConfig
from covdelta.core.errors import FetchError
from covdelta.core.http import get_checked

log = structlog.get_logger()

DEFAULT_RAW_URL_TEMPLATE = "https://raw.githubusercontent.com/{repository}/{commit}/{path}"


class SourceCache:
    """Path → text cache scoped to a single job.

    Keyed by path alone, so it is only valid while every fetch targets the
    same commit. Create one per job and discard it with the job. Guarded by a
    lock so parallel fetches can share it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> str | None:
        with self._lock:
            return self._entries.get(path)

    def put(self, path: str, text: str) -> None:
        with self._lock:
            self._entries[path] = text

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SourceFetcher(Protocol):
    """Anything that can return the text of a file at a commit."""

    def fetch(self, commit: str, path: str, cache: SourceCache | None = None) -> str:
        """Return file text, raising FetchError on failure."""
        ...


class SourceTextProvider:
    """Fetch raw file text over HTTP."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        repository: str,
        url_template: str = DEFAULT_RAW_URL_TEMPLATE,
    ) -> None:
        self._client = client
        self.repository = repository
        self.url_template = url_template

    @classmethod
    def from_config(cls, config: SourcesConfig) -> SourceTextProvider:
        client = httpx.Client(timeout=config.timeout_sec, follow_redirects=True)
        return cls(client, repository=config.repository, url_template=config.raw_url_template)

    def url_for(self, commit: str, path: str) -> str:
        return self.url_template.format(
            repository=self.repository,
            commit=commit,
            path=quote(path, safe="/"),
        )

    def fetch(self, commit: str, path: str, cache: SourceCache | None = None) -> str:
        """Return the text of ``path`` at ``commit``.

        A cache hit returns without network access. The cache must belong to
        the current job (see SourceCache).

        Raises:
            FetchError: On transport failure, timeout, non-2xx status, or a
                body that is not UTF-8.
        """
        if cache is not None:
            cached = cache.get(path)
            if cached is not None:
                log.debug("source.cache_hit", path=path)
                return cached

        url = self.url_for(commit, path)
        log.debug("source.fetch", path=path, commit=commit)
        response = get_checked(self._client, url)

        try:
            text = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FetchError.decode(url, str(e)) from e

        if cache is not None:
            cache.put(path, text)
        return text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SourceTextProvider:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
