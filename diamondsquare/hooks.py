"""Per-point transform hooks run on every committed value."""

from __future__ import annotations

import math
import numbers
from typing import Callable, Iterator

import structlog

logger = structlog.get_logger()

PointHook = Callable[[int, int, int], float]


def is_number(value: object) -> bool:
    """True for real, non-boolean, non-NaN numbers (numpy scalars included)."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not math.isnan(value)


class PointHooks:
    """Ordered list of `(x, y, value) -> value` functions owned by one generator."""

    def __init__(self) -> None:
        self._hooks: list[PointHook] = []

    def __len__(self) -> int:
        return len(self._hooks)

    def __iter__(self) -> Iterator[PointHook]:
        return iter(self._hooks)

    def add(self, *hooks: PointHook) -> None:
        for hook in hooks:
            if not callable(hook):
                raise TypeError(f"point hook must be callable, got {hook!r}")
            self._hooks.append(hook)

    def remove(self, hook: PointHook) -> None:
        self._hooks.remove(hook)

    def clear(self) -> None:
        self._hooks.clear()

    def apply(self, x: int, y: int, value: float) -> float:
        for hook in self._hooks:
            result = hook(x, y, value)
            if not is_number(result):
                logger.warning(
                    "Point hook returned a non-numeric value; keeping previous value",
                    hook=getattr(hook, "__name__", repr(hook)),
                    x=x,
                    y=y,
                    returned=repr(result),
                )
                continue
            value = result
        return value
