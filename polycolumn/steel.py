##############################################
# Reinforcement Module
# Written by: Hossein Karagah
# Date: 2026-10-12
# Description: This module defines longitudinal reinforcement layouts of column sections, generated from lines of evenly spaced bars.
##############################################
from __future__ import annotations

import logging
from dataclasses import dataclass
from math import pi
from typing import Union, Tuple, List, Optional, Sequence

import matplotlib.axes
import matplotlib.pyplot as plt
import numpy as np

from polycolumn.errors import SectionInputError
from polycolumn.shapes import Point, rotate_coordinates

logger = logging.getLogger(__name__)

#############################################
# Global variables
#############################################

# Nominal bar areas in in^2 per ASTM A615 (size: area)
_REBAR_AREAS = {
    3: 0.11,
    4: 0.20,
    5: 0.31,
    6: 0.44,
    7: 0.60,
    8: 0.79,
    9: 1.00,
    10: 1.27,
    11: 1.56,
    14: 2.25,
    18: 4.00,
}

DEDUPLICATION_TOLERANCE = 1e-6


# Main Classes #############################################

@dataclass(frozen=True)
class RebarLine:
    """A line of evenly spaced bars of equal area, end points included."""
    start: Point
    end: Point
    n_bars: int
    bar_area: float

    def __post_init__(self):
        # Accept plain (x, y) tuples for the end points
        if isinstance(self.start, tuple):
            object.__setattr__(self, 'start', Point(*self.start))
        if isinstance(self.end, tuple):
            object.__setattr__(self, 'end', Point(*self.end))
        if int(self.n_bars) != self.n_bars or self.n_bars < 1:
            raise SectionInputError(f"Number of bars must be a positive integer, got {self.n_bars}.")
        if self.bar_area <= 0:
            raise SectionInputError(f"Bar area must be positive, got {self.bar_area}.")

    @classmethod
    def from_size(cls, start: Union[Point, Tuple[float, float]], end: Union[Point, Tuple[float, float]],
                  n_bars: int, size: int) -> 'RebarLine':
        """Builds a line of US standard bars (e.g. #8, #11)."""
        return cls(start, end, n_bars, get_rebar_area(size))

    def coordinates(self) -> np.ndarray:
        """Returns the (n_bars, 2) bar positions. A single bar sits at the start point."""
        if self.n_bars == 1:
            return np.array([[self.start.x, self.start.y]])
        x = np.linspace(self.start.x, self.end.x, int(self.n_bars))
        y = np.linspace(self.start.y, self.end.y, int(self.n_bars))
        return np.column_stack([x, y])


class Reinforcement:
    """Longitudinal bars of a section as parallel coordinate and area arrays.

    Instances are treated as values: rotation returns a new layout and the arrays are read-only.
    """

    def __init__(self, x: Sequence[float], y: Sequence[float], area: Sequence[float]) -> None:
        """
        Args:
            x (Sequence[float]): in, Bar x coordinates.
            y (Sequence[float]): in, Bar y coordinates.
            area (Sequence[float]): in^2, Bar areas.

        Raises:
            SectionInputError: If the arrays have different lengths, contain non-finite values or
                an area is not positive.
        """
        x = np.array(x, dtype=float).reshape(-1)
        y = np.array(y, dtype=float).reshape(-1)
        area = np.array(area, dtype=float).reshape(-1)
        if not len(x) == len(y) == len(area):
            raise SectionInputError(
                f"Reinforcement arrays must have equal lengths, got x={len(x)}, y={len(y)}, area={len(area)}."
            )
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise SectionInputError("Bar coordinates must be finite numbers.")
        if np.any(~(area > 0)):
            raise SectionInputError("Bar areas must be positive.")
        for arr in (x, y, area):
            arr.setflags(write=False)
        self._x = x
        self._y = y
        self._area = area

    @classmethod
    def from_lines(cls, lines: List[RebarLine], tolerance: float = DEDUPLICATION_TOLERANCE) -> 'Reinforcement':
        """Generates bars along each line and removes bars sharing a coordinate.

        Coordinates are compared after rounding to `tolerance`. The first bar at a location is kept
        and the original ordering of the remaining bars is preserved.

        Args:
            lines (List[RebarLine]): Reinforcement lines.
            tolerance (float, optional): Coordinate equality tolerance. Defaults to 1e-6.

        Returns:
            Reinforcement: Deduplicated bar layout.
        """
        if not lines:
            return cls([], [], [])
        coords = np.vstack([line.coordinates() for line in lines])
        areas = np.concatenate([np.full(int(line.n_bars), line.bar_area) for line in lines])

        keys = np.round(coords / tolerance).astype(np.int64)
        _, first_indices = np.unique(keys, axis=0, return_index=True)
        keep = np.sort(first_indices)

        n_duplicates = len(coords) - len(keep)
        if n_duplicates > 0:
            logger.info("Removed %d duplicate reinforcement bar(s) at overlapping coordinates.", n_duplicates)

        return cls(coords[keep, 0], coords[keep, 1], areas[keep])

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    @property
    def area(self) -> np.ndarray:
        return self._area

    @property
    def coordinates(self) -> np.ndarray:
        return np.column_stack([self._x, self._y])

    @property
    def total_area(self) -> float:
        return float(self._area.sum())

    def __len__(self) -> int:
        return len(self._x)

    def rotate(self, angle_deg: float, pivot: Optional[Union[Point, Tuple[float, float]]] = None) -> 'Reinforcement':
        """Returns a new layout rotated counterclockwise by angle_deg around the pivot (origin by default)."""
        if len(self) == 0:
            return Reinforcement([], [], [])
        rotated = rotate_coordinates(self.coordinates, angle_deg, pivot)
        return Reinforcement(rotated[:, 0], rotated[:, 1], self._area)

    def plot(self, ax: matplotlib.axes.Axes = None, **kwargs) -> matplotlib.axes.Axes:
        """
        Plots the bars as filled circles of equivalent diameter on the given axis.

        Args:
            ax (matplotlib.axes.Axes, optional): The axis to plot on. If None, a new figure and axis will be created.
            **kwargs: Additional keyword arguments for the plot.
        """
        if ax is None:
            _, ax = plt.subplots()
        diameters = 2 * np.sqrt(self._area / pi)
        for x, y, dia in zip(self._x, self._y, diameters):
            ax.add_patch(plt.Circle(
                (x, y), dia / 2,
                facecolor=kwargs.get('facecolor', 'black'),
                edgecolor=kwargs.get('edgecolor', 'black'),
                zorder=kwargs.get('zorder', 3),
            ))
        return ax

    def __repr__(self):
        return f"Reinforcement(n_bars={len(self)}, total_area={self.total_area:.3f})"


# Functions #############################################

def get_rebar_area(size: int) -> float:
    """Returns the nominal area of the rebar in square inches based on its size."""
    try:
        return _REBAR_AREAS[size]
    except KeyError:
        raise SectionInputError(f"Invalid rebar size: {size}. Valid sizes are {sorted(_REBAR_AREAS.keys())}.")
