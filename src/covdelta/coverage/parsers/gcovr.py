"""gcovr JSON format parser.

gcovr's JSON report (``gcovr --json``) lists every source file with its
per-line execution counts:

{
  "gcovr/format_version": "0.6",
  "files": [
    {
      "file": "src/init.cpp",
      "lines": [
        {"line_number": 12, "count": 3, "branches": [], "gcovr/noncode": false},
        ...
      ],
      "functions": [...]
    }
  ]
}

Lines flagged ``gcovr/noncode`` were not instrumented and are dropped.

Used by: gcc/gcov and clang builds of C and C++ projects.
"""

import json
from typing import Any

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import CoverageReport

from .base import check_hit, head


class GcovrParser:
    """Parser for gcovr JSON coverage reports."""

    @property
    def format_id(self) -> str:
        return "gcovr"

    def can_parse(self, content: str) -> bool:
        return head(content).startswith("{")

    def parse(self, content: str) -> CoverageReport:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise CoverageParseError.malformed("gcovr", f"invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("files"), list):
            raise CoverageParseError.malformed("gcovr", "missing 'files' list")

        report = CoverageReport(source_format="gcovr")
        for index, entry in enumerate(data["files"]):
            self._parse_file(report, index, entry)
        return report

    def _parse_file(self, report: CoverageReport, index: int, entry: Any) -> None:
        if not isinstance(entry, dict):
            raise CoverageParseError.malformed("gcovr", f"files[{index}] is not an object")
        path = entry.get("file")
        if not isinstance(path, str) or not path:
            raise CoverageParseError.malformed("gcovr", f"files[{index}] has no 'file' path")
        lines = entry.get("lines", [])
        if not isinstance(lines, list):
            raise CoverageParseError.malformed("gcovr", f"'lines' of {path} is not a list")

        file_cov = report.file(path)
        for line in lines:
            if not isinstance(line, dict):
                raise CoverageParseError.malformed(
                    "gcovr", f"line entry in {path} is not an object"
                )
            if line.get("gcovr/noncode"):
                continue
            line_number, count = check_hit(
                "gcovr", path, line.get("line_number"), line.get("count")
            )
            file_cov.add_hit(line_number, count)
