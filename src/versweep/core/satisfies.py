"""Version-range matching on top of PEP 440 specifiers."""

from collections.abc import Sequence

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

ANY_VERSION = ("", "*")

RangeExpr = str | Sequence[str]


def to_specifier(range_expr: str) -> SpecifierSet:
    """Convert one range expression into a SpecifierSet.

    A bare version pins it exactly; ``*`` or an empty string matches anything.

    Raises:
        ValueError: If the expression is neither a specifier nor a version
    """
    expr = range_expr.strip()
    if expr in ANY_VERSION:
        return SpecifierSet()
    try:
        return SpecifierSet(expr)
    except InvalidSpecifier:
        pass
    try:
        Version(expr)
    except InvalidVersion as e:
        raise ValueError(f"Invalid version range: '{range_expr}'") from e
    return SpecifierSet(f"=={expr}")


def satisfies(version: str, ranges: RangeExpr) -> bool:
    """Whether version is inside the range, or inside any of a list of ranges."""
    try:
        parsed = Version(version)
    except InvalidVersion:
        return False

    if isinstance(ranges, str):
        return to_specifier(ranges).contains(parsed)
    return any(to_specifier(r).contains(parsed) for r in ranges)
