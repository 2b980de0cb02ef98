"""Dotted numeric version comparison."""

from itertools import zip_longest


def parse_version(version: str) -> list[int]:
    """Split a dotted version into integer components.

    A leading ``v`` is ignored; components that are not plain integers
    count as 0.
    """
    text = version.strip().removeprefix("v").removeprefix("V")
    return [int(part) if part.isdigit() else 0 for part in text.split(".")]


def compare_versions(left: str, right: str) -> int:
    """Compare two versions component-wise.

    Missing trailing components are treated as 0, so ``1.2`` equals
    ``1.2.0``. The first differing component decides.

    Returns:
        -1, 0 or 1 as ``left`` is older, equal or newer.
    """
    for a, b in zip_longest(parse_version(left), parse_version(right), fillvalue=0):
        if a != b:
            return 1 if a > b else -1
    return 0


def is_newer_version(new_version: str, current_version: str) -> bool:
    """Check whether ``new_version`` is strictly newer than ``current_version``."""
    return compare_versions(new_version, current_version) > 0
