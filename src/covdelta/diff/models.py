"""Data models for unified diffs.

All models are plain dataclasses with no I/O coupling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LineMode(Enum):
    """How a line inside a hunk relates to the two file versions."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class FileMode(Enum):
    NEW = "new"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One line of a hunk body.

    ``number`` is the 1-based line in the new file for ADDED and UNCHANGED
    lines, and the line in the original file for REMOVED lines.
    """

    number: int
    content: str
    mode: LineMode


@dataclass(slots=True)
class Hunk:
    """One ``@@ -a,b +c,d @@`` block."""

    orig_start: int
    orig_length: int
    new_start: int
    new_length: int
    section: str = ""  # text after the closing @@ (usually the enclosing function)
    new_range_lines: list[DiffLine] = field(default_factory=list)  # ADDED + UNCHANGED
    orig_range_lines: list[DiffLine] = field(default_factory=list)  # REMOVED + UNCHANGED
    whole_range_lines: list[DiffLine] = field(default_factory=list)  # body order

    @property
    def new_end(self) -> int:
        """First new-file line after this hunk."""
        return self.new_start + self.new_length


@dataclass(slots=True)
class FileDiff:
    """One file entry of a diff.

    Paths are given without the ``a/``/``b/`` prefixes. ``new_path`` is empty
    for a deleted file and ``orig_path`` is empty for a new file.
    """

    orig_path: str = ""
    new_path: str = ""
    mode: FileMode = FileMode.MODIFIED
    is_binary: bool = False
    hunks: list[Hunk] = field(default_factory=list)


@dataclass(slots=True)
class Diff:
    """A parsed unified diff, files in input order."""

    files: list[FileDiff] = field(default_factory=list)

    def file(self, new_path: str) -> FileDiff | None:
        for fd in self.files:
            if fd.new_path == new_path:
                return fd
        return None
