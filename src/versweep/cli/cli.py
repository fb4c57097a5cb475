import logging
import os

import click

from versweep.cli.commands.humanize import humanize_cmd
from versweep.cli.commands.init import init_cmd
from versweep.cli.commands.run import run_cmd
from versweep.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"], max_content_width=120)


def _configure_logging(verbose: bool) -> None:
    if os.getenv("VERSWEEP_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="versweep")
@click.option("--verbose", is_flag=True, help="Log progress at INFO level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Sweep dependency versions and report which ones work."""
    _configure_logging(verbose)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(run_cmd)
cli.add_command(humanize_cmd)
cli.add_command(init_cmd)


def main() -> None:
    """CLI entry point used by the `versweep` console script."""
    cli()
