"""Neighbour-averaging smoothing passes."""

from __future__ import annotations

import numpy as np
from scipy import ndimage

_CROSS = np.array(
    [
        [0.0, 1.0, 0.0],
        [1.0, 1.0, 1.0],
        [0.0, 1.0, 0.0],
    ],
    dtype=np.float64,
)


def smooth_pass(values: np.ndarray) -> np.ndarray:
    """Mean of each cell and its orthogonal neighbours, read from a frozen snapshot.

    Neighbours outside the grid or unset (NaN) are excluded from both the sum
    and the count. Cells with nothing to average stay NaN.
    """

    known = ~np.isnan(values)
    filled = np.where(known, values, 0.0)
    totals = ndimage.convolve(filled, _CROSS, mode="constant", cval=0.0)
    counts = ndimage.convolve(known.astype(np.float64), _CROSS, mode="constant", cval=0.0)

    means = np.full(values.shape, np.nan, dtype=np.float64)
    np.divide(totals, counts, out=means, where=counts > 0)
    return means
