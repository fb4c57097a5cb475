"""versweep humanize: turn summary files into reports and rendered templates."""

import sys
from collections.abc import Sequence
from pathlib import Path

import click

from versweep.cli.output import user_output
from versweep.core.context import VersweepContext
from versweep.core.differencing import SupportedVersions, supported_versions_by_group
from versweep.core.errors import MissingBaselineError, MissingPackageError, SummaryFormatError
from versweep.core.grouping import (
    SummaryGroup,
    dedupe,
    find_summary_files,
    group_by_major,
    load_records,
    merge_duplicates,
)
from versweep.core.ranges import OutputFilter
from versweep.core.report import ReportOptions, write_report
from versweep.core.template import render_template, write_rendered


def _load_groups(
    paths: Sequence[Path], *, keep_duplicates: bool, merge: bool
) -> list[SummaryGroup]:
    try:
        files = find_summary_files(paths)
    except FileNotFoundError as e:
        raise click.ClickException(str(e)) from e
    if not files:
        raise click.ClickException("No summary files found")

    if not (keep_duplicates or merge):
        files = dedupe(files)

    try:
        records = load_records(files)
    except SummaryFormatError as e:
        raise click.ClickException(str(e)) from e

    groups = group_by_major(records)
    if merge:
        groups = [merge_duplicates(g) for g in groups]
    return groups


def _print_bases(supported: Sequence[SupportedVersions]) -> None:
    for s in supported:
        others = ", ".join(r.os for r in s.others) or "none"
        user_output(f"python {s.key}: base {s.baseline.file.path.name}; others: {others}")


def _warn_differences(supported: Sequence[SupportedVersions]) -> bool:
    found = False
    for s in supported:
        if not s.differences:
            continue
        found = True
        user_output(click.style(f"WARNING: python {s.key} results differ by OS:", fg="yellow"))
        for name in s.differences:
            user_output(f"  {name}: {s.text[name]}")
    return found


def _render_templates(
    template_path: Path, supported: Sequence[SupportedVersions], template_dir: Path
) -> None:
    template = template_path.read_text(encoding="utf-8")
    for s in supported:
        rendered = render_template(template, s.key, s.text)
        written = write_rendered(template_dir, rendered)
        if rendered.errors:
            user_output(click.style(f"wrote {written} with errors", fg="red"))
            for error in rendered.errors:
                user_output(f"  {error}")
        else:
            user_output(f"wrote {written}")


@click.command("humanize")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "-D", "--duplicates", is_flag=True, help="Keep every file instead of the latest per OS."
)
@click.option(
    "-f",
    "--filter",
    "filter_",
    default="p",
    show_default=True,
    help="Ranges to show: p=pass f=fail s=skip t=trailing fail.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Write the report here instead of stdout.",
)
@click.option(
    "-t",
    "--template",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="Template whose {{package:versions}} tokens are filled per python version.",
)
@click.option(
    "--template-dir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Where rendered templates are written (default: current directory).",
)
@click.option("-l", "--last", is_flag=True, help="Show the last version tested per package.")
@click.option(
    "-d",
    "--differences",
    is_flag=True,
    help="Write templates even when OS results differ; without it they are withheld.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show which files were compared.")
@click.option(
    "-s/-S",
    "--fold-over-skips/--no-fold-over-skips",
    default=True,
    show_default=True,
    help="Join ranges of the same outcome separated only by skips.",
)
@click.option(
    "-m", "--merge-duplicates", "merge", is_flag=True, help="Merge runs for the same OS."
)
@click.option("--baseline", help="OS the other results are compared to.")
@click.pass_obj
def humanize_cmd(
    ctx: VersweepContext,
    paths: tuple[Path, ...],
    duplicates: bool,
    filter_: str,
    output: Path | None,
    template: Path | None,
    template_dir: Path | None,
    last: bool,
    differences: bool,
    verbose: bool,
    fold_over_skips: bool,
    merge: bool,
    baseline: str | None,
) -> None:
    """Summarize one or more summary files or directories of them."""
    options = ReportOptions(
        OutputFilter.parse(filter_), fold_over_skips=fold_over_skips, show_last=last
    )

    groups = _load_groups(paths, keep_duplicates=duplicates, merge=merge)

    if output is None:
        write_report(groups, sys.stdout, options)
    else:
        with output.open("w", encoding="utf-8") as f:
            write_report(groups, f, options)

    if template is None:
        return

    try:
        supported = supported_versions_by_group(
            groups, baseline or ctx.config.baseline_os, fold=options.folds
        )
    except (MissingBaselineError, MissingPackageError) as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        _print_bases(supported)

    if _warn_differences(supported) and not differences:
        user_output("Templates not written; pass --differences to write them anyway.")
        return

    _render_templates(template, supported, template_dir or ctx.cwd)
