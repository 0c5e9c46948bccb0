"""Unified diff parser.

Accepts ``git diff`` output (including the extended headers GitHub emits for
pull request diffs) and plain ``diff -u`` output. Every ADDED and UNCHANGED
line gets its number in the new file, which is the join key against coverage
data, so hunk bodies are checked against the header counts and any mismatch
is a parse error rather than a silent misalignment.
"""

from __future__ import annotations

import re

from covdelta.core.errors import DiffParseError
from covdelta.diff.models import Diff, DiffLine, FileDiff, FileMode, Hunk, LineMode

_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")
_GIT_HEADER = re.compile(r"^diff --git a/(.+) b/(.+)$")
_DEV_NULL = "/dev/null"
_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
    '"': 0x22,
}


def parse_diff(text: str) -> Diff:
    """Parse unified diff text.

    Args:
        text: Diff text. Blank text is an empty diff.

    Returns:
        Diff with files, hunks and numbered lines in input order.

    Raises:
        DiffParseError: On malformed hunk headers, hunk bodies that disagree
            with their header counts, overlapping hunks, or non-blank text
            without any file section.
    """
    if not text.strip():
        return Diff()

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()

    parser = _DiffParser()
    for line_no, line in enumerate(lines, start=1):
        parser.feed(line_no, line.removesuffix("\r"))
    return parser.finish(len(lines))


def _read_quoted(text: str) -> tuple[str, str]:
    """Decode a leading C-quoted token; return it and the text after it.

    git quotes paths holding non-ASCII bytes, control characters, quotes or
    backslashes (``core.quotePath``), writing each byte as an octal escape.

    Raises:
        ValueError: On an unterminated token or an unknown escape.
    """
    out = bytearray()
    i = 1
    while i < len(text):
        ch = text[i]
        if ch == '"':
            return out.decode("utf-8", errors="replace"), text[i + 1 :]
        if ch == "\\":
            escape = text[i + 1 : i + 2]
            if escape in _C_ESCAPES:
                out.append(_C_ESCAPES[escape])
                i += 2
                continue
            octal = text[i + 1 : i + 4]
            if len(octal) == 3 and all(c in "01234567" for c in octal):
                out.append(int(octal, 8) & 0xFF)
                i += 4
                continue
            raise ValueError(f"invalid escape {text[i : i + 4]!r} in quoted path")
        out.extend(ch.encode("utf-8"))
        i += 1
    raise ValueError("unterminated quoted path")


def _unquote(raw: str) -> str:
    if raw.startswith('"'):
        path, rest = _read_quoted(raw)
        if rest:
            raise ValueError(f"unexpected text after quoted path: {rest!r}")
        return path
    return raw


def _strip_path(raw: str, prefix: str) -> str:
    # "+++ b/src/foo.cpp\t2024-01-01 00:00:00" -> "src/foo.cpp"
    if raw.startswith('"'):
        path, _ = _read_quoted(raw)
    else:
        path = raw.split("\t", 1)[0]
    if path == _DEV_NULL:
        return ""
    return path.removeprefix(prefix)


def _split_git_paths(line: str) -> tuple[str, str] | None:
    """Both paths of a ``diff --git`` header, prefixes removed."""
    rest = line[len("diff --git ") :]
    if '"' not in rest:
        match = _GIT_HEADER.match(line)
        if match:
            return match.group(1), match.group(2)
        # --no-prefix output
        parts = rest.split(" ")
        return (parts[0], parts[1]) if len(parts) == 2 else None

    if rest.startswith('"'):
        first, remainder = _read_quoted(rest)
        if not remainder.startswith(" "):
            return None
        remainder = remainder[1:]
    else:
        split_at = rest.rfind(' "')
        if split_at < 0:
            return None
        first, remainder = rest[:split_at], rest[split_at + 1 :]

    second = _unquote(remainder)
    return first.removeprefix("a/"), second.removeprefix("b/")


class _DiffParser:
    """Line-at-a-time state machine behind parse_diff()."""

    def __init__(self) -> None:
        self.files: list[FileDiff] = []
        self.current: FileDiff | None = None
        self.saw_orig_header = False
        self.hunk: Hunk | None = None
        self.orig_remaining = 0
        self.new_remaining = 0
        self.orig_no = 0
        self.new_no = 0

    @property
    def in_hunk(self) -> bool:
        return self.orig_remaining > 0 or self.new_remaining > 0

    def feed(self, line_no: int, line: str) -> None:
        try:
            self._feed(line_no, line)
        except ValueError as e:
            raise DiffParseError.at_line(line_no, str(e), line) from e

    def _feed(self, line_no: int, line: str) -> None:
        if self.in_hunk:
            self._hunk_line(line_no, line)
            return

        if line.startswith("\\"):
            # "\ No newline at end of file" after the last body line
            return

        match = _HUNK_HEADER.match(line)
        if match:
            self._start_hunk(line_no, line, match)
        elif line.startswith("@@"):
            raise DiffParseError.at_line(line_no, "malformed hunk header", line)
        elif line.startswith("diff --git "):
            self._start_git_file(line_no, line)
        elif line.startswith("--- "):
            if self.current is None or self.current.hunks or self.saw_orig_header:
                self._new_file()
            assert self.current is not None
            self.current.orig_path = _strip_path(line[4:], "a/")
            if not self.current.orig_path:
                self.current.mode = FileMode.NEW
            self.saw_orig_header = True
        elif line.startswith("+++ "):
            if self.current is None or not self.saw_orig_header:
                raise DiffParseError.at_line(line_no, "'+++' header without '---'", line)
            self.current.new_path = _strip_path(line[4:], "b/")
            if not self.current.new_path:
                self.current.mode = FileMode.DELETED
        elif self.current is not None and not self.current.hunks:
            self._extended_header(line)
        elif line.startswith("+") and self.current is not None:
            raise DiffParseError.at_line(line_no, "added line outside of any hunk", line)
        # Anything else (preamble, trailers, blank separators) is ignored

    def finish(self, line_count: int) -> Diff:
        if self.in_hunk:
            raise DiffParseError.at_line(
                line_count,
                f"diff ends inside a hunk ({self.orig_remaining} original and "
                f"{self.new_remaining} new lines missing)",
            )
        if not self.files:
            raise DiffParseError.at_line(line_count, "no file sections found")
        return Diff(files=self.files)

    def _new_file(self) -> FileDiff:
        self.current = FileDiff()
        self.files.append(self.current)
        self.saw_orig_header = False
        self.hunk = None
        return self.current

    def _start_git_file(self, line_no: int, line: str) -> None:
        paths = _split_git_paths(line)
        if paths is None:
            raise DiffParseError.at_line(line_no, "malformed 'diff --git' header", line)
        fd = self._new_file()
        fd.orig_path, fd.new_path = paths

    def _extended_header(self, line: str) -> None:
        assert self.current is not None
        if line.startswith("new file mode"):
            self.current.mode = FileMode.NEW
            self.current.orig_path = ""
        elif line.startswith("deleted file mode"):
            self.current.mode = FileMode.DELETED
            self.current.new_path = ""
        elif line.startswith("rename from "):
            self.current.mode = FileMode.RENAMED
            self.current.orig_path = _unquote(line[len("rename from ") :])
        elif line.startswith("rename to "):
            self.current.mode = FileMode.RENAMED
            self.current.new_path = _unquote(line[len("rename to ") :])
        elif line.startswith("Binary files ") or line == "GIT binary patch":
            self.current.is_binary = True

    def _start_hunk(self, line_no: int, line: str, match: re.Match[str]) -> None:
        if self.current is None:
            raise DiffParseError.at_line(line_no, "hunk header outside of a file section", line)

        orig_start, orig_len, new_start, new_len, section = match.groups()
        hunk = Hunk(
            orig_start=int(orig_start),
            orig_length=1 if orig_len is None else int(orig_len),
            new_start=int(new_start),
            new_length=1 if new_len is None else int(new_len),
            section=section,
        )

        previous = self.current.hunks[-1] if self.current.hunks else None
        if previous is not None and hunk.new_start < previous.new_end:
            raise DiffParseError.at_line(
                line_no,
                f"hunk starting at new line {hunk.new_start} overlaps or precedes "
                f"the previous hunk ending at {previous.new_end - 1}",
                line,
            )

        self.current.hunks.append(hunk)
        self.hunk = hunk
        self.orig_remaining = hunk.orig_length
        self.new_remaining = hunk.new_length
        self.orig_no = hunk.orig_start
        self.new_no = hunk.new_start

    def _hunk_line(self, line_no: int, line: str) -> None:
        assert self.hunk is not None
        if line.startswith("\\"):
            return

        # Some tools strip the single space of an empty context line
        marker, content = (line[:1], line[1:]) if line else (" ", "")

        if marker == " " and self.orig_remaining > 0 and self.new_remaining > 0:
            new_line = DiffLine(self.new_no, content, LineMode.UNCHANGED)
            self.hunk.new_range_lines.append(new_line)
            self.hunk.orig_range_lines.append(DiffLine(self.orig_no, content, LineMode.UNCHANGED))
            self.hunk.whole_range_lines.append(new_line)
            self.orig_no += 1
            self.new_no += 1
            self.orig_remaining -= 1
            self.new_remaining -= 1
        elif marker == "+" and self.new_remaining > 0:
            new_line = DiffLine(self.new_no, content, LineMode.ADDED)
            self.hunk.new_range_lines.append(new_line)
            self.hunk.whole_range_lines.append(new_line)
            self.new_no += 1
            self.new_remaining -= 1
        elif marker == "-" and self.orig_remaining > 0:
            old_line = DiffLine(self.orig_no, content, LineMode.REMOVED)
            self.hunk.orig_range_lines.append(old_line)
            self.hunk.whole_range_lines.append(old_line)
            self.orig_no += 1
            self.orig_remaining -= 1
        else:
            raise DiffParseError.at_line(
                line_no,
                f"hunk body does not match its header ({self.orig_remaining} original and "
                f"{self.new_remaining} new lines expected)",
                line,
            )
