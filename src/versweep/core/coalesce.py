"""Adjacent-run reduction shared by range folding and duplicate merging."""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")


def coalesce_adjacent(
    items: Iterable[T],
    same_run: Callable[[T, T], bool],
    merge: Callable[[T, T], T],
) -> list[T]:
    """Merge each item into its predecessor while the two belong to the same run.

    Order is preserved and only neighbours are ever merged; merge() receives
    the accumulated earlier item first.

    Example:
        >>> coalesce_adjacent([1, 1, 2, 1], lambda a, b: a == b, lambda a, b: a)
        [1, 2, 1]
    """
    result: list[T] = []
    for item in items:
        if result and same_run(result[-1], item):
            result[-1] = merge(result[-1], item)
        else:
            result.append(item)
    return result
