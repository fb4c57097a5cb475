"""Contiguous version ranges sharing one outcome.

A package's range list is ordered by ascending version and covers every
version that was looked at exactly once. Folding only joins neighbours, so
coverage never changes.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from versweep.core.coalesce import coalesce_adjacent

Outcome = Literal["pass", "fail", "skip"]
OUTCOMES: tuple[Outcome, ...] = ("pass", "fail", "skip")


@dataclass(frozen=True)
class Range:
    """A run of consecutive versions with the same outcome.

    raw_items holds the version strings covered, in order.
    """

    key: Outcome
    first: str
    last: str
    count: int
    raw_items: tuple[str, ...] = ()

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> "Range":
        key = data["key"]
        if key not in OUTCOMES:
            raise ValueError(f"Unknown range key: {key!r}")
        return Range(
            key=key,
            first=str(data["first"]),
            last=str(data["last"]),
            count=int(data["count"]),
            raw_items=tuple(str(i) for i in data.get("rawItems", [])),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "first": self.first,
            "last": self.last,
            "count": self.count,
            "rawItems": list(self.raw_items),
        }

    @property
    def text(self) -> str:
        """``first`` alone when the range is one version, else ``first-last``."""
        return self.first if self.first == self.last else f"{self.first}-{self.last}"


def _same_key(a: Range, b: Range) -> bool:
    return a.key == b.key


def _join(a: Range, b: Range) -> Range:
    return Range(
        key=a.key,
        first=a.first,
        last=b.last,
        count=a.count + b.count,
        raw_items=a.raw_items + b.raw_items,
    )


def build_ranges(observations: Iterable[tuple[str, Outcome]]) -> list[Range]:
    """Compress ordered (version, outcome) observations into ranges."""
    singles = (
        Range(key=outcome, first=version, last=version, count=1, raw_items=(version,))
        for version, outcome in observations
    )
    return coalesce_adjacent(singles, _same_key, _join)


def fold_over_skips(ranges: Sequence[Range], *, drop_skips: bool = True) -> list[Range]:
    """Drop skip ranges and join neighbours that now share a key.

    Idempotent: folding a folded list returns an equal list.
    """
    kept = [r for r in ranges if not (drop_skips and r.key == "skip")]
    return coalesce_adjacent(kept, _same_key, _join)


def ranges_equal(a: Sequence[Range], b: Sequence[Range]) -> bool:
    """Same length and every aligned pair equal on key, bounds, count and items."""
    if len(a) != len(b):
        return False
    return all(
        x.key == y.key
        and x.first == y.first
        and x.last == y.last
        and x.count == y.count
        and x.raw_items == y.raw_items
        for x, y in zip(a, b, strict=True)
    )


def pass_text(ranges: Sequence[Range]) -> str:
    """Comma-separated text of the pass ranges, e.g. ``1.0.0-1.3.0, 2.0.0``."""
    return ", ".join(r.text for r in ranges if r.key == "pass")


@dataclass(frozen=True)
class OutputFilter:
    """Which ranges a report shows.

    Built from a selector string: p=pass, f=fail, s=skip, t=trailing-fails.
    Unknown letters are ignored.
    """

    passes: bool = False
    fails: bool = False
    skips: bool = False
    trailing_fails: bool = False

    @staticmethod
    def parse(selectors: str) -> "OutputFilter":
        return OutputFilter(
            passes="p" in selectors,
            fails="f" in selectors,
            skips="s" in selectors,
            trailing_fails="t" in selectors,
        )

    @property
    def passes_only(self) -> bool:
        return self.passes and not (self.fails or self.skips or self.trailing_fails)

    def shows(self, key: Outcome) -> bool:
        return {"pass": self.passes, "fail": self.fails, "skip": self.skips}[key]


def select_ranges(ranges: Sequence[Range], output_filter: OutputFilter) -> list[Range]:
    """The ranges a report line list should show, in order.

    With trailing-fails, a terminal fail range is always shown; a terminal
    skip range directly after a fail range stands in for that fail range, so
    a package that stopped being tested right after failing is still flagged.
    """
    selected: list[Range] = []
    for index, r in enumerate(ranges):
        is_last = index == len(ranges) - 1
        if output_filter.trailing_fails and is_last:
            if r.key == "fail":
                selected.append(r)
                continue
            previous = ranges[index - 1] if index > 0 else None
            if r.key == "skip" and previous is not None and previous.key == "fail":
                if not output_filter.fails:
                    selected.append(previous)
                continue
        if output_filter.shows(r.key):
            selected.append(r)
    return selected
