"""Human-readable text report of grouped summaries."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from versweep.core.grouping import SummaryGroup
from versweep.core.ranges import OutputFilter, Range, fold_over_skips, select_ranges
from versweep.core.summary import PackageResults, SummaryRecord

SECTION_BAR = "=" * 60


@dataclass(frozen=True)
class ReportOptions:
    """How ranges are selected and shown.

    fold_over_skips is ignored when the filter asks to see skips.
    """

    output_filter: OutputFilter
    fold_over_skips: bool = True
    show_last: bool = False

    @property
    def folds(self) -> bool:
        return self.fold_over_skips and not self.output_filter.skips


def displayed_ranges(results: PackageResults, options: ReportOptions) -> list[Range]:
    ranges = list(results.ranges)
    if options.folds:
        ranges = fold_over_skips(ranges)
    return select_ranges(ranges, options.output_filter)


def range_line(r: Range, options: ReportOptions) -> str:
    if options.output_filter.passes_only and r.key == "pass":
        return f"  {r.text}"
    return f"  {r.key} {r.text} ({r.count})"


def format_record(record: SummaryRecord, options: ReportOptions) -> list[str]:
    """Report lines for one OS run: its meta header, then each package."""
    meta = record.summary.meta
    os_text = f"{meta.os.id} {meta.os.version}" if meta.os else record.os
    lines = [
        f"{meta.package} {meta.version} commit {meta.commit}",
        f" python {meta.runtime} on {os_text} at {meta.timestamp}",
        f" {meta.package} branch: {meta.branch} et: {meta.elapsed}",
        f"{meta.versions}",
        "packages:",
    ]
    for name, results in record.summary.packages.items():
        header = name
        if options.show_last:
            header += f" (last tested: {results.latest})"
        lines.append(header)
        lines.extend(range_line(r, options) for r in displayed_ranges(results, options))
    return lines


def write_report(groups: Sequence[SummaryGroup], stream: TextIO, options: ReportOptions) -> None:
    """One section per major runtime version, one block per OS record."""
    for group in groups:
        stream.write(f"{SECTION_BAR}\npython version {group.key}\n{SECTION_BAR}\n")
        for record in group.items:
            stream.write("\n".join(format_record(record, options)))
            stream.write("\n\n")
