"""Pinning of named points, rows, columns and coordinates before displacement."""

from __future__ import annotations

import numbers
from typing import Callable, Mapping

import structlog

logger = structlog.get_logger()

Commit = Callable[[int, int, float, bool], int]

# (x, y) as fractions of max_key: 0 = first, 1 = half, 2 = last.
NAMED_POINTS: dict[str, tuple[int, int]] = {
    "n": (1, 0),
    "ne": (2, 0),
    "e": (2, 1),
    "se": (2, 2),
    "s": (1, 2),
    "sw": (0, 2),
    "w": (0, 1),
    "nw": (0, 0),
    "center": (1, 1),
    "mid": (1, 1),
}

LINE_NAMES = {"first": 0, "mid": 1, "center": 1, "last": 2}


def _scale(slot: int, max_key: int) -> int | None:
    if slot == 1:
        if max_key % 2:
            return None
        return max_key // 2
    return 0 if slot == 0 else max_key


def named_point(name: str, max_key: int) -> tuple[int, int] | None:
    """Coordinates of a compass point, or None if the name is unknown or has no cell."""

    slots = NAMED_POINTS.get(name.lower())
    if slots is None:
        return None
    x = _scale(slots[0], max_key)
    y = _scale(slots[1], max_key)
    if x is None or y is None:
        return None
    return x, y


def _is_index(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def line_index(key: str | int, max_key: int) -> int | None:
    """Resolve `first`/`mid`/`center`/`last` or an integer index to a row/column."""

    if isinstance(key, str):
        lowered = key.strip().lower()
        if lowered in LINE_NAMES:
            return _scale(LINE_NAMES[lowered], max_key)
        if not lowered.lstrip("-").isdigit():
            return None
        key = int(lowered)
    if isinstance(key, bool) or not isinstance(key, numbers.Integral):
        return None
    key = int(key)
    if 0 <= key <= max_key:
        return key
    return None


def set_named_points(commit: Commit, max_key: int, named: Mapping[str, float], *, override: bool = True) -> None:
    for name, value in named.items():
        point = named_point(name, max_key)
        if point is None:
            logger.warning("Skipping unknown named point", name=name, max_key=max_key)
            continue
        commit(point[0], point[1], value, override)


def set_lines(
    commit: Commit,
    max_key: int,
    lines: Mapping[str | int, float],
    *,
    axis: str,
    override: bool = True,
) -> None:
    """Fill whole rows (`axis="row"`, fixed y) or columns (`axis="column"`, fixed x)."""

    if axis not in ("row", "column"):
        raise ValueError(f"axis must be 'row' or 'column', got {axis!r}")

    for key, value in lines.items():
        index = line_index(key, max_key)
        if index is None:
            logger.warning(f"Skipping unresolvable {axis}", key=key, max_key=max_key)
            continue
        for position in range(max_key + 1):
            if axis == "row":
                commit(position, index, value, override)
            else:
                commit(index, position, value, override)


def set_points(
    commit: Commit,
    max_key: int,
    points: Mapping[tuple[int, int], float],
    *,
    override: bool = True,
) -> None:
    for (x, y), value in points.items():
        if not _is_index(x) or not _is_index(y):
            logger.debug("Skipping non-integer point", x=x, y=y)
            continue
        x, y = int(x), int(y)
        if not (0 <= x <= max_key and 0 <= y <= max_key):
            logger.debug("Skipping out-of-range point", x=x, y=y, max_key=max_key)
            continue
        commit(x, y, value, override)


def set_border(commit: Commit, max_key: int, value: float, *, override: bool = True) -> None:
    """Pin the outermost ring of cells to one value."""

    set_lines(commit, max_key, {"first": value, "last": value}, axis="column", override=override)
    set_lines(commit, max_key, {"first": value, "last": value}, axis="row", override=override)
