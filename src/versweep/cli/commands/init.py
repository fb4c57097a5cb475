import click

from versweep.cli.config import write_default_config
from versweep.cli.output import user_output
from versweep.core.context import VersweepContext


@click.command("init")
@click.pass_obj
def init_cmd(ctx: VersweepContext) -> None:
    """Add a [tool.versweep] table to pyproject.toml."""
    if write_default_config(ctx.cwd):
        user_output(f"Wrote [tool.versweep] to {ctx.cwd / 'pyproject.toml'}")
    else:
        user_output("[tool.versweep] already configured")
