"""Unified diff model and parser."""

from covdelta.core.errors import DiffParseError
from covdelta.diff.models import Diff, DiffLine, FileDiff, FileMode, Hunk, LineMode
from covdelta.diff.parser import parse_diff

__all__ = [
    "Diff",
    "DiffLine",
    "DiffParseError",
    "FileDiff",
    "FileMode",
    "Hunk",
    "LineMode",
    "parse_diff",
]
