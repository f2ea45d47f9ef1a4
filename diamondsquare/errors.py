"""Error types raised by the heightmap generator."""

from __future__ import annotations


class DiamondSquareError(Exception):
    """Base class for generator errors."""


class InvalidSizeError(DiamondSquareError, ValueError):
    """Grid dimension is not of the form 2**n + 1."""


class GridIndexError(DiamondSquareError, IndexError):
    """Cell coordinates fall outside the grid."""


class TypeMismatchError(DiamondSquareError, TypeError):
    """A non-numeric value was supplied where a number is required."""


class NotInitializedError(DiamondSquareError, RuntimeError):
    """The operation needs a grid (or a filled cell) that does not exist yet."""
