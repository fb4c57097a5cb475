"""Output helpers for CLI commands.

user_output is for people (stderr); report data is written to an explicit
stream by the command so it can be redirected.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Diagnostic or progress message for the user, on stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Data meant for stdout."""
    click.echo(message, nl=nl)
