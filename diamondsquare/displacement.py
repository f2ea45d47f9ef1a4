"""Diamond-square midpoint displacement over halving step sizes."""

from __future__ import annotations

import math
from typing import Callable

import structlog

from diamondsquare.grid import Grid
from diamondsquare.rng import RandomSource

logger = structlog.get_logger()

# commit(x, y, value) -> committed value; value None means "draw one".
PointCommit = Callable[[int, int, "float | None"], int]
Displace = Callable[[int], int]


def displacement(random: RandomSource, step: int, max_key: int, mid: int, roughness: float) -> int:
    """Random offset for one commit at `step`; amplitude is proportional to step / max_key."""

    draw = random.random_in_range(True, mid)
    return math.floor(draw * (step / max_key * 2 * roughness / 1000))


def seed_outer(grid: Grid, commit: PointCommit, displace: Displace) -> None:
    """Commit the corners, the center and the four edge midpoints of the whole grid."""

    dim = grid.max_key
    nw = commit(0, 0, None)
    ne = commit(dim, 0, None)
    se = commit(dim, dim, None)
    sw = commit(0, dim, None)
    if dim < 2:
        return

    half = dim // 2
    center = commit(half, half, (nw + ne + se + sw) / 4 + displace(dim))

    commit(half, dim, (sw + se + center + center) / 4 + displace(dim))
    commit(half, 0, (nw + ne + center + center) / 4 + displace(dim))
    commit(dim, half, (ne + se + center + center) / 4 + displace(dim))
    commit(0, half, (nw + sw + center + center) / 4 + displace(dim))


def subdivide(grid: Grid, commit: PointCommit, displace: Displace, step: int) -> None:
    """Fill the centers and edge midpoints of every `step // 2` tile.

    Tiles are visited column by column (x outer, y inner). North and west
    midpoints take the far neighbour into a 4-term average when it lies inside
    the grid; south and east midpoints always use the 3-term average of their
    corners and the tile center. Since the previous tile's south/east commit
    has already filled the shared midpoint, interior north/west commits never
    change a cell, but still draw their displacement.
    """

    half = step // 2
    quarter = half // 2
    value = grid.value_at

    for i in range(half, grid.dimension, half):
        for j in range(half, grid.dimension, half):
            nw = value(i - half, j - half)
            ne = value(i, j - half)
            se = value(i, j)
            sw = value(i - half, j)

            x = i - quarter
            y = j - quarter

            center = commit(x, y, (nw + ne + se + sw) / 4 + displace(step))

            if j - half - quarter > 0:
                commit(x, j - half, (nw + ne + center + value(x, j - half - quarter)) / 4 + displace(step))
            else:
                commit(x, j - half, (nw + ne + center) / 3 + displace(step))

            commit(x, j, (sw + se + center) / 3 + displace(step))
            commit(i, y, (ne + se + center) / 3 + displace(step))

            if i - half - quarter > 0:
                commit(i - half, y, (nw + sw + center + value(i - half - quarter, y)) / 4 + displace(step))
            else:
                commit(i - half, y, (nw + sw + center) / 3 + displace(step))


def run_displacement(grid: Grid, commit: PointCommit, displace: Displace) -> None:
    """Fill every unset cell of `grid`, coarse levels first."""

    seed_outer(grid, commit, displace)

    step = grid.max_key
    while step // 2 > 1:
        logger.debug("Subdividing", step=step, tile=step // 2)
        subdivide(grid, commit, displace, step)
        step //= 2
