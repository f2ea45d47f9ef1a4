"""Heightmap generator: settings, pinning, displacement and smoothing."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

import numpy as np
import structlog

from diamondsquare import boundary
from diamondsquare.config import Settings, log_cost_warnings
from diamondsquare.displacement import displacement, run_displacement
from diamondsquare.errors import NotInitializedError, TypeMismatchError
from diamondsquare.grid import Grid
from diamondsquare.hooks import PointHook, PointHooks, is_number
from diamondsquare.rng import RandomSource, create_random_source
from diamondsquare.smooth import smooth_pass

logger = structlog.get_logger()


class DiamondSquare:
    """Diamond-Square heightmap generator.

    Typical use::

        ds = DiamondSquare({"size": 7, "prng": numpy_prng, "seed": "misty"})
        ds.create_grid()
        ds.set_named_points({"nw": 0, "se": 255})
        grid = ds.make()
    """

    def __init__(self, settings: Settings | Mapping[str, Any] | None = None) -> None:
        self.hooks = PointHooks()
        self.grid: Grid | None = None
        self._settings = Settings()
        self._random: RandomSource
        self.configure(settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def random(self) -> RandomSource:
        return self._random

    @property
    def dimension(self) -> int:
        return self._require_grid().dimension

    @property
    def max_key(self) -> int:
        return self._require_grid().max_key

    def configure(self, settings: Settings | Mapping[str, Any] | None = None, **changes: Any) -> Settings:
        """Apply new settings and recreate the random source.

        A seedable run keeps its seed across reconfiguration unless a new one
        (or an explicit ``seed=None``) is given.
        """

        if isinstance(settings, Settings):
            resolved = settings
        elif settings is not None:
            resolved = Settings.from_mapping(settings, base=self._settings)
        else:
            resolved = self._settings
        if changes:
            resolved = Settings.from_mapping(changes, base=resolved)

        self._random = create_random_source(resolved)
        self._settings = replace(resolved, seed=self._random.seed)
        log_cost_warnings(self._settings)
        return self._settings

    def resolved_settings(self) -> dict[str, Any]:
        """Settings actually used, including the seed to replay this run."""

        payload = self._settings.to_dict()
        if self.grid is not None:
            payload["dimension"] = self.grid.dimension
            payload["max_key"] = self.grid.max_key
        return payload

    def create_grid(self, size: int | None = None) -> Grid:
        self.grid = Grid.for_size(self._settings.size if size is None else size)
        return self.grid

    def load_grid(self, values: Any) -> Grid:
        """Use an existing (possibly partially filled) grid; set cells count as pinned.

        Set cells are clamped into [min, max] and truncated like any commit.
        """

        grid = values if isinstance(values, Grid) else Grid.from_array(values)
        clipped = np.clip(grid.to_array(), self._settings.min, self._settings.max)
        grid.replace_values(np.trunc(clipped))
        self.grid = grid
        return self.grid

    def _require_grid(self) -> Grid:
        if self.grid is None:
            raise NotInitializedError("No grid has been defined yet. Create or load a grid first.")
        return self.grid

    def _limit(self, value: float) -> float:
        if not is_number(value):
            raise TypeMismatchError(f"value {value!r} is of type {type(value).__name__}, expected a number")
        return min(max(value, self._settings.min), self._settings.max)

    def set_point(self, x: int, y: int, value: float | None = None, override: bool = False) -> int:
        """Commit one cell: clamp, truncate, run hooks, store.

        An occupied cell is left alone (and returned) unless `override` is set.
        """

        grid = self._require_grid()
        if value is None:
            value = self._random.random_in_range()
        value = int(self._limit(value))

        current = grid.get(x, y)
        if current is not None and not override:
            return current

        value = int(self._limit(self.hooks.apply(x, y, value)))
        grid.set(x, y, value)
        return value

    def _commit(self, x: int, y: int, value: float | None, override: bool = False) -> int:
        return self.set_point(x, y, value, override)

    def set_named_points(self, named: Mapping[str, float], override: bool = True) -> None:
        boundary.set_named_points(self._commit, self.max_key, named, override=override)

    def set_rows(self, rows: Mapping[str | int, float], override: bool = True) -> None:
        boundary.set_lines(self._commit, self.max_key, rows, axis="row", override=override)

    def set_columns(self, columns: Mapping[str | int, float], override: bool = True) -> None:
        boundary.set_lines(self._commit, self.max_key, columns, axis="column", override=override)

    def set_points(self, points: Mapping[tuple[int, int], float], override: bool = True) -> None:
        boundary.set_points(self._commit, self.max_key, points, override=override)

    def set_border(self, value: float, override: bool = True) -> None:
        boundary.set_border(self._commit, self.max_key, value, override=override)

    def add_point_hook(self, *hooks: PointHook) -> None:
        self.hooks.add(*hooks)

    def remove_point_hook(self, hook: PointHook) -> None:
        self.hooks.remove(hook)

    def clear_point_hooks(self) -> None:
        self.hooks.clear()

    def displace(self, step: int) -> int:
        settings = self._settings
        return displacement(self._random, step, self.max_key, settings.mid, settings.roughness)

    def start_displacement(self) -> None:
        run_displacement(self._require_grid(), self._commit, self.displace)

    def smoothen(self, passes: int | None = None) -> None:
        grid = self._require_grid()
        passes = self._settings.smoothness if passes is None else passes
        for index in range(passes):
            logger.debug("Smoothing pass", index=index, passes=passes)
            means = smooth_pass(grid.to_array())
            if len(self.hooks) == 0:
                clipped = np.clip(means, self._settings.min, self._settings.max)
                grid.replace_values(np.trunc(clipped))
                continue
            for x in range(grid.dimension):
                for y in range(grid.dimension):
                    mean = means[y, x]
                    if not np.isnan(mean):
                        self.set_point(x, y, float(mean), override=True)

    def make(self) -> Grid:
        """Fill every unset cell, then run `smoothness` smoothing passes."""

        grid = self._require_grid()
        self.start_displacement()
        self.smoothen()
        return grid
