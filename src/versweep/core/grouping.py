"""Selecting, deduplicating, grouping and merging summary records."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from versweep.core.coalesce import coalesce_adjacent
from versweep.core.summary import (
    SummaryFileName,
    SummaryRecord,
    load_summary,
    release_sort_key,
)


@dataclass(frozen=True)
class SummaryGroup:
    """Records sharing one major runtime version, ordered by (OS, timestamp)."""

    key: str
    items: tuple[SummaryRecord, ...]


def find_summary_files(paths: Iterable[Path]) -> list[SummaryFileName]:
    """Expand files and directories into summary files, sorted for grouping.

    Directory entries and files whose names do not follow the summary
    convention are ignored.

    Raises:
        FileNotFoundError: If a given path does not exist
    """
    candidates: list[Path] = []
    for path in paths:
        if path.is_dir():
            candidates.extend(sorted(p for p in path.iterdir() if p.is_file()))
        elif path.is_file():
            candidates.append(path)
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")

    names = [n for n in (SummaryFileName.parse(p) for p in candidates) if n is not None]
    return sorted(names, key=lambda n: n.sort_key)


def dedupe(files: Sequence[SummaryFileName]) -> list[SummaryFileName]:
    """Keep only the latest file per (OS, major runtime version)."""
    latest: dict[tuple[str, str], SummaryFileName] = {}
    for f in files:
        key = (f.os, f.major_version)
        if key not in latest or f.timestamp >= latest[key].timestamp:
            latest[key] = f
    return sorted(latest.values(), key=lambda n: n.sort_key)


def load_records(files: Sequence[SummaryFileName]) -> list[SummaryRecord]:
    """Load every file; the first invalid one aborts with SummaryFormatError."""
    return [SummaryRecord(file=f, summary=load_summary(f.path)) for f in files]


def group_by_major(records: Iterable[SummaryRecord]) -> list[SummaryGroup]:
    """Partition by major runtime version, groups ascending."""
    buckets: dict[str, list[SummaryRecord]] = {}
    for record in records:
        buckets.setdefault(record.major_version, []).append(record)

    return [
        SummaryGroup(
            key=key,
            items=tuple(sorted(buckets[key], key=lambda r: (r.os, r.file.timestamp))),
        )
        for key in sorted(buckets, key=release_sort_key)
    ]


def merge_duplicates(group: SummaryGroup) -> SummaryGroup:
    """Fold each run of same-OS records into one, later records winning."""
    merged = coalesce_adjacent(
        group.items,
        lambda a, b: a.os == b.os,
        lambda a, b: a.merged_with(b),
    )
    return SummaryGroup(key=group.key, items=tuple(merged))
