"""Rich rendering of matrix results."""

from collections.abc import Sequence

from rich.table import Table

from versweep.core.summary import outcome_of
from versweep.core.version_spec import VersionSpec


def results_table(specs: Sequence[VersionSpec]) -> Table:
    """Per-package pass/fail/skip counts for a finished run."""
    table = Table(title="versweep results")
    table.add_column("Package", style="bold")
    table.add_column("Versions", justify="right")
    table.add_column("Pass", justify="right", style="green")
    table.add_column("Fail", justify="right", style="red")
    table.add_column("Skip", justify="right", style="dim")

    for spec in specs:
        results = spec.results or ()
        outcomes = [outcome_of(e) for e in results]
        table.add_row(
            spec.name,
            str(len(outcomes)),
            str(outcomes.count("pass")),
            str(outcomes.count("fail")),
            str(outcomes.count("skip")),
        )
    return table
