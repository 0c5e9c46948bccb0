"""Rendering of engine results for the terminal."""

import json
from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from covdelta.engine.models import CoverageLineRecord


def format_ratio(ratio: float | None) -> str:
    return "n/a" if ratio is None else f"{ratio:.2%}"


def emit_json(records: list[CoverageLineRecord], ratio: float | None, mode: str) -> None:
    payload = {
        "mode": mode,
        "ratio": ratio,
        "lines": [record.to_dict() for record in records],
    }
    click.echo(json.dumps(payload, indent=2))


def emit_table(records: list[CoverageLineRecord], ratio: float | None, mode: str) -> None:
    """Per-file counts plus the overall ratio."""
    lines: Counter[str] = Counter()
    testable: Counter[str] = Counter()
    covered: Counter[str] = Counter()
    changed: Counter[str] = Counter()
    for record in records:
        lines[record.file] += 1
        testable[record.file] += record.testable
        covered[record.file] += record.covered
        changed[record.file] += record.changed

    table = Table(title=f"{mode} coverage")
    table.add_column("File")
    table.add_column("Lines", justify="right")
    table.add_column("Changed", justify="right")
    table.add_column("Testable", justify="right")
    table.add_column("Covered", justify="right")
    for path in lines:
        table.add_row(
            path,
            str(lines[path]),
            str(changed[path]),
            str(testable[path]),
            str(covered[path]),
        )

    console = Console()
    console.print(table)
    console.print(f"Coverage ratio: [bold]{format_ratio(ratio)}[/bold]")
