"""Configuration model for heightmap generation."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import numbers
from typing import Any, Callable, Mapping

import structlog

from diamondsquare.errors import InvalidSizeError

logger = structlog.get_logger()

PrngFactory = Callable[[str], Callable[[], float]]

DEFAULT_SIZE = 9
DEFAULT_ROUGHNESS = 2500.0
DEFAULT_SMOOTHNESS = 2
DEFAULT_MIN = 0
DEFAULT_MAX = 255

# Above these the generator still runs, but slowly enough to be worth a warning.
EXPENSIVE_SIZE = 9
SMOOTHING_BUDGET = 2400

SETTING_KEYS = ("size", "roughness", "smoothness", "seed", "min", "max", "prng")


@dataclass(frozen=True)
class Settings:
    """Generation parameters; replaced wholesale rather than mutated."""

    size: int = DEFAULT_SIZE
    roughness: float = DEFAULT_ROUGHNESS
    smoothness: int = DEFAULT_SMOOTHNESS
    min: int = DEFAULT_MIN
    max: int = DEFAULT_MAX
    seed: str | None = None
    prng: PrngFactory | None = None

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, numbers.Integral) or self.size < 0:
            raise InvalidSizeError(f"size must be a non-negative integer, got {self.size!r}")
        if self.roughness < 0:
            raise ValueError("roughness must be >= 0")
        if isinstance(self.smoothness, bool) or not isinstance(self.smoothness, numbers.Integral):
            raise ValueError(f"smoothness must be an integer, got {self.smoothness!r}")
        if self.smoothness < 0:
            raise ValueError("smoothness must be >= 0")
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        if self.seed is not None and not isinstance(self.seed, str):
            object.__setattr__(self, "seed", str(self.seed))

    @property
    def mid(self) -> int:
        return (self.min + self.max) // 2

    @property
    def dimension(self) -> int:
        """Side length a grid allocated from `size` will have."""

        return 2**self.size + 1

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], *, base: Settings | None = None) -> Settings:
        """Build settings from a plain mapping, starting from `base` (or defaults)."""

        changes: dict[str, Any] = {}
        for key, value in mapping.items():
            if key not in SETTING_KEYS:
                logger.warning("Ignoring unknown setting", key=key)
                continue
            changes[key] = value

        if "size" in changes:
            changes["size"] = _coerce_size(changes["size"])
        if "smoothness" in changes:
            changes["smoothness"] = int(changes["smoothness"])

        return replace(base or cls(), **changes)

    def to_dict(self) -> dict[str, Any]:
        payload = {f.name: getattr(self, f.name) for f in fields(self)}
        payload["prng"] = _prng_name(self.prng)
        payload["mid"] = self.mid
        return payload


def smoothing_budget(size: int) -> int:
    """Largest smoothness that stays cheap for a grid of the given size."""

    if size <= 5:
        return SMOOTHING_BUDGET
    if size > EXPENSIVE_SIZE:
        return 0
    return SMOOTHING_BUDGET // 4 ** (size - 5)


def log_cost_warnings(settings: Settings) -> None:
    if settings.size > EXPENSIVE_SIZE:
        logger.warning(
            "Large grid size will slow generation down",
            size=settings.size,
            dimension=settings.dimension,
        )
    budget = smoothing_budget(settings.size)
    if settings.smoothness > budget:
        logger.warning(
            "Smoothness is expensive at this grid size",
            smoothness=settings.smoothness,
            size=settings.size,
            budget=budget,
        )


def _coerce_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidSizeError(f"size must be a number, got {value!r}")
    return int(value)


def _prng_name(prng: PrngFactory | None) -> str | None:
    if prng is None:
        return None
    module = getattr(prng, "__module__", None)
    name = getattr(prng, "__qualname__", None) or type(prng).__qualname__
    return f"{module}.{name}" if module else name
