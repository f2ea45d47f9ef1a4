"""Square heightmap container with unset cells."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
import structlog

from diamondsquare.errors import GridIndexError, InvalidSizeError, NotInitializedError

logger = structlog.get_logger()


def is_valid_dimension(dimension: int) -> bool:
    """True when `dimension` is 2**n + 1 for some n >= 0."""

    side = dimension - 1
    return dimension >= 2 and side & (side - 1) == 0


class Grid:
    """`dimension x dimension` cells indexed by (x, y); NaN marks an unset cell."""

    def __init__(self, cells: np.ndarray) -> None:
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise InvalidSizeError(f"grid must be square, got shape {cells.shape}")
        if not is_valid_dimension(cells.shape[0]):
            raise InvalidSizeError(f"grid dimension must be 2**n + 1, got {cells.shape[0]}")
        self._cells = cells

    @classmethod
    def allocate(cls, dimension: int) -> Grid:
        if not is_valid_dimension(dimension):
            raise InvalidSizeError(f"grid dimension must be 2**n + 1, got {dimension}")
        logger.debug("Allocating grid", dimension=dimension)
        return cls(np.full((dimension, dimension), np.nan, dtype=np.float64))

    @classmethod
    def for_size(cls, size: int) -> Grid:
        if size < 0:
            raise InvalidSizeError(f"size must be >= 0, got {size}")
        return cls.allocate(2**size + 1)

    @classmethod
    def from_array(cls, values: Any) -> Grid:
        """Pre-seed a grid from a square 2D structure indexed [y][x]; None/NaN stay unset."""

        rows = [[np.nan if value is None else value for value in row] for row in values]
        cells = np.array(rows, dtype=np.float64)
        if cells.ndim != 2:
            raise InvalidSizeError("grid values must be two-dimensional")
        return cls(np.trunc(cells))

    @property
    def dimension(self) -> int:
        return int(self._cells.shape[0])

    @property
    def max_key(self) -> int:
        return self.dimension - 1

    @property
    def size_factor(self) -> int:
        return int(math.log2(self.max_key))

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the cells, indexed [y, x]."""

        view = self._cells.view()
        view.flags.writeable = False
        return view

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x <= self.max_key and 0 <= y <= self.max_key

    def _check(self, x: int, y: int) -> None:
        if not self.contains(x, y):
            raise GridIndexError(f"cell ({x}, {y}) is outside a {self.dimension}x{self.dimension} grid")

    def get(self, x: int, y: int) -> int | None:
        self._check(x, y)
        value = self._cells[y, x]
        if np.isnan(value):
            return None
        return int(value)

    def value_at(self, x: int, y: int) -> int:
        value = self.get(x, y)
        if value is None:
            raise NotInitializedError(f"cell ({x}, {y}) has not been set")
        return value

    def is_set(self, x: int, y: int) -> bool:
        return self.get(x, y) is not None

    def set(self, x: int, y: int, value: float) -> None:
        self._check(x, y)
        self._cells[y, x] = value

    def replace_values(self, values: np.ndarray) -> None:
        """Overwrite every cell at once; `values` must match the grid shape."""

        if values.shape != self._cells.shape:
            raise InvalidSizeError(f"expected shape {self._cells.shape}, got {values.shape}")
        self._cells[...] = values

    def is_complete(self) -> bool:
        return not bool(np.isnan(self._cells).any())

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def to_list(self) -> list[list[int | None]]:
        return [[self.get(x, y) for x in range(self.dimension)] for y in range(self.dimension)]
