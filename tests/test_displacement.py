from __future__ import annotations

from itertools import cycle
from typing import Callable

import numpy as np
import pytest

from diamondsquare.displacement import displacement
from diamondsquare.errors import NotInitializedError
from diamondsquare.generator import DiamondSquare
from diamondsquare.rng import RandomSource, numpy_prng


def _sequence_prng(values: list[float]) -> Callable[[str], Callable[[], float]]:
    def factory(seed: str) -> Callable[[], float]:
        draws = cycle(values)
        return lambda: next(draws)

    return factory


def _flat_generator(size: int = 2) -> DiamondSquare:
    # Corner draws: 0.5 -> 50, 0.25 -> 24, 0.75 -> 75, 0.1 -> 9 over [-1, 101).
    ds = DiamondSquare(
        {
            "size": size,
            "min": 0,
            "max": 100,
            "roughness": 0,
            "smoothness": 0,
            "prng": _sequence_prng([0.5, 0.25, 0.75, 0.1]),
            "seed": "flat",
        }
    )
    ds.create_grid()
    return ds


def test_zero_roughness_fills_with_exact_averages() -> None:
    ds = _flat_generator()
    grid = ds.make()

    expected = [
        [50, 42, 38, 32, 24],
        [41, 40, 39, 36, 34],
        [34, 37, 39, 39, 44],
        [24, 30, 36, 49, 56],
        [9, 26, 40, 54, 75],
    ]
    assert grid.to_list() == expected


def test_initial_plus_pattern_uses_corner_and_center_averages() -> None:
    grid = _flat_generator().make()

    nw, ne, se, sw = grid.get(0, 0), grid.get(4, 0), grid.get(4, 4), grid.get(0, 4)
    center = grid.get(2, 2)
    assert center == int((nw + ne + se + sw) / 4)
    assert grid.get(2, 0) == int((nw + ne + 2 * center) / 4)
    assert grid.get(2, 4) == int((sw + se + 2 * center) / 4)
    assert grid.get(4, 2) == int((ne + se + 2 * center) / 4)
    assert grid.get(0, 2) == int((nw + sw + 2 * center) / 4)


def test_interior_edge_midpoints_use_three_term_average() -> None:
    grid = _flat_generator().make()

    # (2, 3) is the east midpoint of the tile centred on (1, 3). Its far
    # neighbour (3, 3) lies inside the grid but is not part of the average.
    ne, se, center = grid.get(2, 2), grid.get(2, 4), grid.get(1, 3)
    assert grid.get(2, 3) == int((ne + se + center) / 3)
    assert grid.get(2, 3) != int((ne + se + center + grid.get(3, 3)) / 4)

    # (1, 2) is shared by two tiles; the first tile's south commit wins.
    assert grid.get(1, 2) == int((grid.get(0, 2) + grid.get(2, 2) + grid.get(1, 1)) / 3)


def test_all_corners_pinned_is_a_fixed_point() -> None:
    ds = DiamondSquare({"size": 4, "roughness": 0, "smoothness": 7, "prng": numpy_prng, "seed": "flat"})
    ds.create_grid()
    ds.set_named_points({"nw": 10, "ne": 10, "se": 10, "sw": 10}, override=True)

    grid = ds.make()

    assert np.array_equal(grid.values, np.full((17, 17), 10.0))


def test_every_cell_is_filled_within_bounds() -> None:
    ds = DiamondSquare(
        {"size": 5, "min": -50, "max": 50, "roughness": 9000, "smoothness": 0, "prng": numpy_prng, "seed": "rough"}
    )
    ds.create_grid()
    grid = ds.make()

    assert grid.is_complete()
    assert grid.values.min() >= -50
    assert grid.values.max() <= 50
    assert np.array_equal(grid.values, np.trunc(grid.values))


def test_pinned_cells_survive_displacement() -> None:
    ds = DiamondSquare({"size": 4, "smoothness": 0, "prng": numpy_prng, "seed": "pins"})
    ds.create_grid()
    ds.set_points({(3, 5): 77, (8, 8): 200}, override=False)
    ds.set_rows({"last": 3})

    grid = ds.make()

    assert grid.get(3, 5) == 77
    assert grid.get(8, 8) == 200
    assert all(grid.get(x, 16) == 3 for x in range(17))


def test_two_by_two_grid_only_has_corners() -> None:
    ds = DiamondSquare({"size": 0, "prng": numpy_prng, "seed": "tiny"})
    ds.create_grid()
    grid = ds.make()

    assert grid.dimension == 2
    assert grid.is_complete()


def test_displacement_amplitude_shrinks_with_step() -> None:
    top = RandomSource(lambda: 0.999, 0, 255)
    bottom = RandomSource(lambda: 0.0, 0, 255)
    steps = [64, 32, 16, 8, 4, 2]

    upper = [displacement(top, step, 64, 127, 2500) for step in steps]
    lower = [displacement(bottom, step, 64, 127, 2500) for step in steps]

    assert upper[0] == 643
    assert lower[0] == -640
    assert upper == sorted(upper, reverse=True)
    assert lower == sorted(lower)
    assert all(value > 0 for value in upper)


def test_displacement_is_zero_without_roughness() -> None:
    source = RandomSource(lambda: 0.3, 0, 255)

    assert displacement(source, 16, 16, 127, 0) == 0


def test_displacement_requires_grid() -> None:
    ds = DiamondSquare({"size": 3})

    with pytest.raises(NotInitializedError):
        ds.start_displacement()
    with pytest.raises(NotInitializedError):
        ds.make()


class _CountingPrng:
    def __init__(self) -> None:
        self.draws = 0

    def __call__(self, seed: str) -> Callable[[], float]:
        generator = numpy_prng(seed)

        def draw() -> float:
            self.draws += 1
            return generator()

        return draw


def _draws_during_make(pin_border: bool) -> int:
    counter = _CountingPrng()
    ds = DiamondSquare({"size": 4, "smoothness": 0, "prng": counter, "seed": "count"})
    ds.create_grid()
    if pin_border:
        ds.set_border(0)
    counter.draws = 0
    ds.make()
    return counter.draws


def test_pinned_cells_do_not_change_the_number_of_draws() -> None:
    bare = _draws_during_make(pin_border=False)
    pinned = _draws_during_make(pin_border=True)

    # 4 corners + 5 outer displacements + 5 per tile at every level.
    assert bare == 4 + 5 + 5 * (2 * 2 + 4 * 4 + 8 * 8)
    assert pinned == bare
