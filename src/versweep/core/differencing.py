"""Cross-environment differencing against a baseline OS.

For each major runtime version the baseline OS's pass ranges become the
supported-version text of every package. Any other OS whose ranges differ
for a package appends ``(os: ranges)`` to that text and the package is
recorded as differing.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from versweep.core.errors import MissingBaselineError, MissingPackageError
from versweep.core.grouping import SummaryGroup
from versweep.core.ranges import Range, fold_over_skips, pass_text, ranges_equal
from versweep.core.summary import PackageResults, SummaryRecord

DEFAULT_BASELINE_OS = "ubuntu"


@dataclass(frozen=True)
class SupportedVersions:
    """Supported-version text per package for one major runtime version."""

    key: str
    baseline: SummaryRecord
    others: tuple[SummaryRecord, ...]
    text: dict[str, str]
    differences: tuple[str, ...]


def _comparable(results: PackageResults, fold: bool) -> list[Range]:
    return fold_over_skips(results.ranges) if fold else list(results.ranges)


def supported_versions(
    group: SummaryGroup, baseline_os: str = DEFAULT_BASELINE_OS, *, fold: bool = True
) -> SupportedVersions:
    """Diff every non-baseline record of a group against the baseline.

    Raises:
        MissingBaselineError: If no record in the group is for baseline_os
        MissingPackageError: If another record lacks a baseline package
    """
    baseline: SummaryRecord | None = None
    others: list[SummaryRecord] = []
    for record in group.items:
        if record.summary.meta.os_id == baseline_os:
            if baseline is not None:
                others.append(baseline)
            baseline = record
        else:
            others.append(record)

    if baseline is None:
        raise MissingBaselineError(
            f"Cannot find baseline OS ({baseline_os}) for runtime version {group.key}"
        )

    text: dict[str, str] = {}
    differences: list[str] = []
    for name, results in baseline.summary.packages.items():
        base_ranges = _comparable(results, fold)
        text[name] = pass_text(base_ranges)

        for other in others:
            other_results = other.summary.packages.get(name)
            other_os = other.summary.meta.os_id
            if other_results is None:
                raise MissingPackageError(f"{other_os} is missing package {name}")

            other_ranges = _comparable(other_results, fold)
            if ranges_equal(base_ranges, other_ranges):
                continue
            if name not in differences:
                differences.append(name)
            other_text = pass_text(other_ranges)
            if other_text:
                text[name] += f" ({other_os}: {other_text})"

    return SupportedVersions(
        key=group.key,
        baseline=baseline,
        others=tuple(others),
        text=text,
        differences=tuple(differences),
    )


def supported_versions_by_group(
    groups: Sequence[SummaryGroup], baseline_os: str = DEFAULT_BASELINE_OS, *, fold: bool = True
) -> list[SupportedVersions]:
    return [supported_versions(g, baseline_os, fold=fold) for g in groups]
