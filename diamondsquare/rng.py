"""Seedable random sources for reproducible heightmaps."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
from typing import Callable

import numpy as np
import structlog

from diamondsquare.config import Settings

logger = structlog.get_logger()

SEED_TOKEN_LENGTH = 11


def seed_hash64(seed: str) -> int:
    """Hash a seed string to a deterministic unsigned 64-bit integer."""

    digest = hashlib.blake2b(
        seed.encode("utf-8"),
        digest_size=8,
        person=b"dsquare02",
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def numpy_prng(seed: str) -> Callable[[], float]:
    """Seedable PRNG factory: `seed -> () -> float in [0, 1)` backed by PCG64."""

    generator = np.random.Generator(np.random.PCG64(np.uint64(seed_hash64(seed))))
    return generator.random


def random_seed() -> str:
    """Return a short random base-36 token usable as a replay seed."""

    rng = np.random.default_rng()
    value = int(rng.integers(36 ** (SEED_TOKEN_LENGTH - 1), 36**SEED_TOKEN_LENGTH))
    return np.base_repr(value, base=36).lower()


@dataclass
class RandomSource:
    """Float source in [0, 1) bound to the value range of one settings snapshot."""

    draw: Callable[[], float]
    low: int
    high: int
    seed: str | None = None

    @property
    def reproducible(self) -> bool:
        return self.seed is not None

    def next(self) -> float:
        return float(self.draw())

    def random_in_range(self, inclusive: bool = True, offset: float = 0.0) -> float:
        """Map `next()` onto [low, high], widened by one unit each side when inclusive."""

        low = self.low
        high = self.high
        if inclusive:
            low -= 1
            high += 1
        return self.next() * (high - low) + low - offset


def create_random_source(settings: Settings) -> RandomSource:
    """Create the random source for `settings`, generating a seed when needed."""

    if settings.prng is None:
        logger.warning("No prng factory configured; seed is ignored and the run is not reproducible")
        return RandomSource(np.random.default_rng().random, settings.min, settings.max, seed=None)

    seed = settings.seed if settings.seed is not None else random_seed()
    return RandomSource(settings.prng(seed), settings.min, settings.max, seed=seed)
