"""covdelta baseline command - coverage of every instrumented line at a commit."""

from pathlib import Path

import click

from covdelta.cli.output import emit_json, emit_table
from covdelta.config.models import CovDeltaConfig
from covdelta.core.errors import ParseError
from covdelta.coverage.parsers import PARSER_BY_FORMAT, parse_artifact
from covdelta.engine.baseline import compute_baseline_coverage
from covdelta.engine.ratio import compute_coverage_ratio
from covdelta.sources.local import DirectorySourceProvider
from covdelta.sources.provider import SourceCache, SourceFetcher, SourceTextProvider


@click.command()
@click.argument("coverage", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--commit", required=True, help="Commit the coverage artifact was produced from")
@click.option(
    "--source-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Read sources from a local checkout instead of fetching them",
)
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
def baseline_command(
    obj: dict[str, CovDeltaConfig],
    coverage: Path,
    commit: str,
    source_dir: Path | None,
    format_id: str | None,
    report_id: str,
    as_json: bool,
) -> None:
    """Classify every instrumented line of COVERAGE at COMMIT.

    Files whose source cannot be retrieved are skipped.
    """
    config = obj["config"]
    try:
        report = parse_artifact(coverage, format_id=format_id)
    except ParseError as e:
        raise click.ClickException(str(e)) from e

    remote: SourceTextProvider | None = None
    provider: SourceFetcher
    if source_dir is not None:
        provider = DirectorySourceProvider(source_dir)
    else:
        provider = remote = SourceTextProvider.from_config(config.sources)

    try:
        records = compute_baseline_coverage(
            report,
            commit,
            provider,
            report_id,
            policy=config.exclusion.to_policy(),
            cache=SourceCache(),
            max_workers=config.sources.max_workers,
        )
    finally:
        if remote is not None:
            remote.close()

    ratio = compute_coverage_ratio(records, restrict_to_changed=False)

    if as_json:
        emit_json(records, ratio, "baseline")
    else:
        emit_table(records, ratio, "Baseline")
