"""covdelta CLI - covdelta command."""

from pathlib import Path

import click

from covdelta.cli.baseline import baseline_command
from covdelta.cli.diff import diff_command
from covdelta.config.loader import load_config
from covdelta.core.errors import ConfigError
from covdelta.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="covdelta")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .covdelta.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """covdelta - line-level coverage for pull requests and trunk commits."""
    try:
        config = load_config(config_dir)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(diff_command, name="diff")
cli.add_command(baseline_command, name="baseline")


if __name__ == "__main__":
    cli()
