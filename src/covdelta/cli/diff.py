"""covdelta diff command - coverage of the lines a diff touches."""

from pathlib import Path

import click

from covdelta.cli.output import emit_json, emit_table
from covdelta.config.models import CovDeltaConfig
from covdelta.core.errors import ParseError
from covdelta.coverage.parsers import PARSER_BY_FORMAT, parse_artifact
from covdelta.diff.parser import parse_diff
from covdelta.engine.differential import compute_diff_coverage
from covdelta.engine.ratio import compute_coverage_ratio


@click.command()
@click.argument("coverage", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("diff", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "format_id",
    type=click.Choice(sorted(PARSER_BY_FORMAT)),
    default=None,
    help="Coverage artifact format (default: auto-detect)",
)
@click.option("--report-id", default="local", help="Report identifier stamped on each line")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def diff_command(
    obj: dict[str, CovDeltaConfig],
    coverage: Path,
    diff: Path,
    format_id: str | None,
    report_id: str,
    as_json: bool,
) -> None:
    """Classify the lines of DIFF against the COVERAGE artifact.

    The ratio counts only lines the diff adds.
    """
    config = obj["config"]
    try:
        report = parse_artifact(coverage, format_id=format_id)
        parsed = parse_diff(diff.read_text(encoding="utf-8"))
    except ParseError as e:
        raise click.ClickException(str(e)) from e

    records = compute_diff_coverage(
        report, parsed, report_id, policy=config.exclusion.to_policy()
    )
    ratio = compute_coverage_ratio(records, restrict_to_changed=True)

    if as_json:
        emit_json(records, ratio, "differential")
    else:
        emit_table(records, ratio, "Differential")
