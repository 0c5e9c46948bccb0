"""Cobertura XML format parser.

Structure:
<coverage line-rate="0.85" branch-rate="0.50" ...>
  <packages>
    <package name="...">
      <classes>
        <class name="..." filename="..." line-rate="...">
          <methods>...</methods>
          <lines>
            <line number="1" hits="1"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Used by: gcovr --cobertura, coverage.py, coverlet
"""

import xml.etree.ElementTree as ET

from covdelta.core.errors import CoverageParseError
from covdelta.coverage.models import CoverageReport

from .base import check_hit, head


class CoberturaParser:
    """Parser for Cobertura XML format."""

    @property
    def format_id(self) -> str:
        return "cobertura"

    def can_parse(self, content: str) -> bool:
        header = head(content)
        # line-rate distinguishes Cobertura from Clover's <coverage> root
        return header.startswith("<") and "<coverage" in header and "line-rate=" in header

    def parse(self, content: str) -> CoverageReport:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise CoverageParseError.malformed("cobertura", f"invalid XML: {e}") from e

        # Strip namespace if present
        for elem in root.iter():
            if "}" in elem.tag:
                elem.tag = elem.tag.split("}", 1)[1]

        if root.tag != "coverage":
            raise CoverageParseError.malformed("cobertura", f"unexpected root <{root.tag}>")

        report = CoverageReport(source_format="cobertura")
        for cls in root.iter("class"):
            filename = cls.get("filename", "")
            if not filename:
                raise CoverageParseError.malformed("cobertura", "<class> without filename")
            file_cov = report.file(filename)

            # Class-level lines only; method-level lines repeat them
            for line in cls.findall("./lines/line"):
                try:
                    line_number = int(line.get("number", ""))
                    hits = int(line.get("hits", ""))
                except ValueError as e:
                    raise CoverageParseError.malformed(
                        "cobertura", f"non-numeric <line> in {filename}", path=filename
                    ) from e
                file_cov.add_hit(*check_hit("cobertura", filename, line_number, hits))

        return report
