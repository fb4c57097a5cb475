"""versweep run: sweep every dependency in the versions file."""

import logging
from pathlib import Path

import click
from rich.console import Console

from versweep.cli.output import machine_output, user_output
from versweep.cli.rendering import results_table
from versweep.core.context import VersweepContext
from versweep.core.errors import VersionSpecError
from versweep.core.host import detect_os, runtime_version
from versweep.core.location import InstallLocation
from versweep.core.progress import LoggingObserver, ProgressObserver
from versweep.core.sequencer import MatrixSequencer
from versweep.core.summary import SummaryMeta, build_summary, write_summary
from versweep.core.version_spec import VersionSpec, load_version_specs

logger = logging.getLogger(__name__)

FILE_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def _load_specs(path: Path, only: tuple[str, ...]) -> list[VersionSpec]:
    if not path.exists():
        raise click.ClickException(f"Versions file not found: {path}")
    try:
        specs = load_version_specs(path)
    except VersionSpecError as e:
        raise click.ClickException(str(e)) from e

    if not only:
        return specs
    known = {spec.name for spec in specs}
    unknown = [name for name in only if name not in known]
    if unknown:
        raise click.ClickException(f"Not in {path.name}: {', '.join(unknown)}")
    return [spec for spec in specs if spec.name in only]


@click.command("run")
@click.option(
    "--versions-file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Versions file to read (default from [tool.versweep]).",
)
@click.option(
    "--summary-dir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Directory the summary JSON is written to.",
)
@click.option("--only", multiple=True, help="Only sweep this package (repeatable).")
@click.option(
    "--inherit-output",
    is_flag=True,
    help="Stream install and test output instead of capturing it.",
)
@click.option("--no-summary", is_flag=True, help="Do not write a summary file.")
@click.pass_obj
def run_cmd(
    ctx: VersweepContext,
    versions_file: Path | None,
    summary_dir: Path | None,
    only: tuple[str, ...],
    inherit_output: bool,
    no_summary: bool,
) -> None:
    """Install and test every version named in the versions file.

    Each dependency is swept one version at a time in the configured
    interpreter's environment; whatever was installed before is put back
    afterwards. Test failures are recorded, not treated as errors.
    """
    path = versions_file or ctx.config.versions_file
    specs = _load_specs(path, only)

    location = InstallLocation(
        ctx.installer,
        ctx.runner,
        cwd=ctx.cwd,
        stdio="inherit" if inherit_output else "pipe",
    )
    sequencer = MatrixSequencer(
        location, ctx.discovery, observers=[LoggingObserver(), ProgressObserver()]
    )

    started = ctx.time.now()
    results: list[VersionSpec] = []
    for spec in specs:
        user_output(click.style(f"{spec.name}", bold=True))
        results.append(sequencer.run_spec(spec))
    finished = ctx.time.now()

    Console(stderr=True).print(results_table(results))

    if no_summary:
        return

    meta = SummaryMeta(
        package=ctx.config.package,
        version=ctx.config.version,
        commit=ctx.git.get_head_commit(ctx.cwd),
        runtime=runtime_version(),
        os=detect_os(),
        timestamp=finished.isoformat(),
        start_time=int(started.timestamp() * 1000),
        end_time=int(finished.timestamp() * 1000),
        branch=ctx.git.get_current_branch(ctx.cwd),
        versions=str(path),
    )
    written = write_summary(
        summary_dir or ctx.config.summary_dir,
        build_summary(results, meta),
        finished.strftime(FILE_TIMESTAMP_FORMAT),
    )
    logger.info("summary written to %s", written)
    machine_output(str(written))
