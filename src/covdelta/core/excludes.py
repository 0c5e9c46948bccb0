"""Path exclusion policy for coverage accounting.

Two ordered rule sets decide whether a file counts toward coverage:

1. Excluded directory prefixes: a path starting with any of them is excluded,
   whatever its extension.
2. Allowed extensions: a path ending with any of them is included.

Anything else is excluded (default deny). Matching is plain string
prefix/suffix comparison on the path exactly as the diff or coverage report
spells it: no normalization, case-sensitive.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = (
    "src/test",
    "src/qt/test",
    "src/wallet/test",
    "test",
    "src/bench",
)

DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (
    ".cpp",
    ".h",
    ".c",
)


@dataclass(frozen=True, slots=True)
class ExclusionPolicy:
    """Static path filter shared by the differential and baseline computers."""

    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS

    @classmethod
    def from_lists(
        cls, excluded_dirs: Iterable[str], allowed_extensions: Iterable[str]
    ) -> ExclusionPolicy:
        return cls(tuple(excluded_dirs), tuple(allowed_extensions))

    def is_excluded(self, path: str) -> bool:
        # Prefix exclusion wins over an allowed extension
        if path.startswith(self.excluded_dirs):
            return True
        return not path.endswith(self.allowed_extensions)


DEFAULT_POLICY = ExclusionPolicy()


def is_excluded(path: str, policy: ExclusionPolicy = DEFAULT_POLICY) -> bool:
    """Check a path against a policy (the built-in defaults if none given)."""
    return policy.is_excluded(path)


__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_POLICY",
    "ExclusionPolicy",
    "is_excluded",
]
