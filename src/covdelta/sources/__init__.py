"""Source text retrieval for baseline coverage."""

from covdelta.sources.local import DirectorySourceProvider
from covdelta.sources.provider import (
    DEFAULT_RAW_URL_TEMPLATE,
    SourceCache,
    SourceFetcher,
    SourceTextProvider,
)

__all__ = [
    "DirectorySourceProvider",
    "DEFAULT_RAW_URL_TEMPLATE",
    "SourceCache",
    "SourceFetcher",
    "SourceTextProvider",
]
