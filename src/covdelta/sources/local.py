"""Source text from a local checkout."""

from __future__ import annotations

from pathlib import Path

from covdelta.core.errors import FetchError
from covdelta.sources.provider import SourceCache


class DirectorySourceProvider:
    """Read files from a working tree assumed to be checked out at the commit.

    The ``commit`` argument is not used to select content; it only shows up
    in error details. Paths must be relative to the checkout: absolute paths
    and ``..`` components are refused.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def fetch(self, commit: str, path: str, cache: SourceCache | None = None) -> str:
        if cache is not None:
            cached = cache.get(path)
            if cached is not None:
                return cached

        relative = Path(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise FetchError.invalid_path(path, f"not inside the checkout at {self.root}")

        file_path = self.root / relative
        try:
            text = file_path.read_bytes().decode("utf-8")
        except OSError as e:
            raise FetchError.transport(str(file_path), f"{e.strerror or e} at {commit}") from e
        except UnicodeDecodeError as e:
            raise FetchError.decode(str(file_path), str(e)) from e

        if cache is not None:
            cache.put(path, text)
        return text
