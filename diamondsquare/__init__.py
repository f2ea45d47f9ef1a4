"""Diamond-Square heightmap generation package."""

from .config import DEFAULT_MAX, DEFAULT_MIN, DEFAULT_ROUGHNESS, DEFAULT_SIZE, DEFAULT_SMOOTHNESS, Settings
from .errors import (
    DiamondSquareError,
    GridIndexError,
    InvalidSizeError,
    NotInitializedError,
    TypeMismatchError,
)
from .generator import DiamondSquare
from .grid import Grid
from .rng import RandomSource, numpy_prng, random_seed

__all__ = [
    "DEFAULT_SIZE",
    "DEFAULT_ROUGHNESS",
    "DEFAULT_SMOOTHNESS",
    "DEFAULT_MIN",
    "DEFAULT_MAX",
    "DiamondSquare",
    "DiamondSquareError",
    "Grid",
    "GridIndexError",
    "InvalidSizeError",
    "NotInitializedError",
    "RandomSource",
    "Settings",
    "TypeMismatchError",
    "numpy_prng",
    "random_seed",
]
