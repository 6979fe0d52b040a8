################################
# Interaction Surface Module
# Written by: Hossein Karagah
# Date: 2026-10-15
# Description: This module sweeps bending angles and axial load levels over a reinforced column section and collects the resulting (P, Mx, My) capacity points into an interaction surface.
################################
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from polycolumn.concrete import ReinforcedSection, nominal_compressive_strength, nominal_tensile_strength
from polycolumn.errors import DegenerateGeometryError, CapacityEvaluationError
from polycolumn.shapes import Polygon
from polycolumn.solver import EquilibriumSolver, SolverConfig, SolverStatus
from polycolumn.transform import rotate_section

logger = logging.getLogger(__name__)

# Angles and loads closer than this are treated as the same sweep value
SWEEP_MATCH_TOLERANCE = 1e-9


@dataclass
class InteractionPoint:
    """One (angle, load) point of a sweep. Moments are about the fixed section axes.

    Points whose solve did not converge, or whose evaluation failed, are kept with valid=False so
    the caller can see what happened; their numeric fields may be NaN.
    """
    angle: float
    target: float
    Pn: float
    Mx: float
    My: float
    c: float
    residual: float
    status: Optional[SolverStatus]
    valid: bool
    Pns: np.ndarray = field(default_factory=lambda: np.empty(0))
    zones: List[Polygon] = field(default_factory=list)
    message: str = ""

    @property
    def M(self) -> float:
        """Returns the resultant moment magnitude."""
        return float(np.hypot(self.Mx, self.My))


class InteractionSurface:
    """Ordered collection of interaction points, sorted by angle and then by target load."""

    def __init__(self, points: Sequence[InteractionPoint]):
        self._points = tuple(sorted(points, key=lambda p: (p.angle, p.target)))

    @property
    def points(self) -> List[InteractionPoint]:
        return list(self._points)

    @property
    def valid_points(self) -> List[InteractionPoint]:
        return [p for p in self._points if p.valid]

    @property
    def invalid_points(self) -> List[InteractionPoint]:
        return [p for p in self._points if not p.valid]

    @property
    def angles(self) -> np.ndarray:
        return np.unique([p.angle for p in self._points])

    @property
    def loads(self) -> np.ndarray:
        return np.unique([p.target for p in self._points])

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[InteractionPoint]:
        return iter(self._points)

    def meridian(self, angle: float) -> List[InteractionPoint]:
        """Returns the valid points of one bending angle ordered by increasing achieved axial load."""
        points = [p for p in self.valid_points if abs(p.angle - angle) <= SWEEP_MATCH_TOLERANCE]
        return sorted(points, key=lambda p: p.Pn)

    def contour(self, load: float) -> List[InteractionPoint]:
        """Returns the valid points of one axial load level ordered by angle."""
        tol = SWEEP_MATCH_TOLERANCE * max(1.0, abs(load))
        points = [p for p in self.valid_points if abs(p.target - load) <= tol]
        return sorted(points, key=lambda p: p.angle)

    def to_dataframe(self) -> pd.DataFrame:
        """Returns the sweep as a table, one row per point, in sweep order."""
        records = [
            {
                'angle': p.angle,
                'target': p.target,
                'Pn': p.Pn,
                'Mx': p.Mx,
                'My': p.My,
                'M': p.M,
                'c': p.c,
                'residual': p.residual,
                'status': p.status.value if p.status is not None else None,
                'valid': p.valid,
                'message': p.message,
            }
            for p in self._points
        ]
        columns = ['angle', 'target', 'Pn', 'Mx', 'My', 'M', 'c', 'residual', 'status', 'valid', 'message']
        return pd.DataFrame.from_records(records, columns=columns)

    def __repr__(self):
        return (f"InteractionSurface(n_points={len(self)}, n_valid={len(self.valid_points)}, "
                f"n_angles={len(self.angles)}, n_loads={len(self.loads)})")


# Functions ################################################

def angle_range(start: float, end: float, increment: float) -> np.ndarray:
    """Returns bending angles from start to end, both included when end falls on the increment.

    Args:
        start (float): deg, First angle.
        end (float): deg, Last angle.
        increment (float): deg, Positive angle step.

    Raises:
        ValueError: If the increment is not positive or end is before start.
    """
    if increment <= 0:
        raise ValueError(f"Angle increment must be positive, got {increment}.")
    if end < start:
        raise ValueError(f"End angle {end} is before start angle {start}.")
    n = int(np.floor((end - start) / increment + 1e-9)) + 1
    return start + increment * np.arange(n)


def load_range(section: ReinforcedSection, n: int = 20) -> np.ndarray:
    """Returns n evenly spaced axial loads from the nominal tensile to the nominal compressive strength."""
    if n < 2:
        raise ValueError(f"At least 2 load levels are needed, got {n}.")
    return np.linspace(nominal_tensile_strength(section).Pn, nominal_compressive_strength(section).Pn, n)


def generate_interaction_surface(section: ReinforcedSection, angles: Sequence[float], loads: Sequence[float],
                                 config: Optional[SolverConfig] = None,
                                 max_workers: Optional[int] = None) -> InteractionSurface:
    """Solves the section for every combination of bending angle and axial load.

    Each angle gets its own rotated copy of the section. Points whose geometry or capacity evaluation
    fails are recorded as invalid rather than aborting the sweep; invalid input still raises.

    Args:
        section (ReinforcedSection): Un-rotated section.
        angles (Sequence[float]): deg, Bending angles.
        loads (Sequence[float]): Target axial loads, compression positive.
        config (Optional[SolverConfig], optional): Solver settings. Defaults to None.
        max_workers (Optional[int], optional): Number of worker threads. Defaults to None (sequential).

    Returns:
        InteractionSurface: Points ordered by angle, then by target load.
    """
    if not isinstance(section, ReinforcedSection):
        raise TypeError("'section' must be an instance of 'ReinforcedSection'.")
    angles = [float(a) for a in np.atleast_1d(angles)]
    loads = [float(p) for p in np.atleast_1d(loads)]
    if not angles or not loads:
        raise ValueError("At least one angle and one load level are required.")
    config = config if config is not None else SolverConfig()

    logger.info("Generating interaction surface: %d angle(s) x %d load level(s).", len(angles), len(loads))
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(lambda angle: _sweep_angle(section, angle, loads, config), angles))
    else:
        results = [_sweep_angle(section, angle, loads, config) for angle in angles]

    surface = InteractionSurface([point for points in results for point in points])
    n_invalid = len(surface.invalid_points)
    if n_invalid:
        logger.warning("%d of %d interaction point(s) are invalid.", n_invalid, len(surface))
    logger.info("Interaction surface complete: %d valid point(s).", len(surface.valid_points))
    return surface


def generate_interaction_diagram(section: ReinforcedSection, load: float, angle_increment: float = 15.0,
                                 config: Optional[SolverConfig] = None) -> InteractionSurface:
    """Generates the Mx-My contour of one axial load level over a full turn of bending angles.

    Returns:
        InteractionSurface: One point per angle in [0, 360); use contour(load) for the ring.
    """
    angles = angle_range(0.0, 360.0, angle_increment)
    angles = angles[angles < 360.0 - SWEEP_MATCH_TOLERANCE]
    return generate_interaction_surface(section, angles, [load], config)


def generate_meridian(section: ReinforcedSection, angle: float, loads: Optional[Sequence[float]] = None,
                      config: Optional[SolverConfig] = None) -> InteractionSurface:
    """Generates the P-M curve of one bending angle, over load_range(section) unless loads are given."""
    if loads is None:
        loads = load_range(section)
    return generate_interaction_surface(section, [angle], loads, config)


def _sweep_angle(section: ReinforcedSection, angle: float, loads: List[float],
                 config: SolverConfig) -> List[InteractionPoint]:
    try:
        rotated = rotate_section(section, angle)
    except DegenerateGeometryError as err:
        logger.warning("Rotation to %g deg failed: %s", angle, err)
        return [_invalid_point(angle, load, str(err)) for load in loads]

    solver = EquilibriumSolver(rotated, angle, config)
    points = []
    for load in sorted(loads):
        try:
            solution = solver.solve(load)
        except (DegenerateGeometryError, CapacityEvaluationError) as err:
            logger.warning("Point (angle=%g, P=%g) failed: %s", angle, load, err)
            points.append(_invalid_point(angle, load, str(err)))
            continue

        logger.debug("Point (angle=%g, P=%g): c=%g, residual=%g, %s",
                     angle, load, solution.c, solution.residual, solution.status.value)
        message = ""
        if not solution.converged:
            message = f"{solution.status.value}, residual {solution.residual:.4g}"
            logger.warning("Point (angle=%g, P=%g) is %s.", angle, load, message)
        points.append(InteractionPoint(
            angle=angle,
            target=load,
            Pn=solution.Pn,
            Mx=solution.Mnx,
            My=solution.Mny,
            c=solution.c,
            residual=solution.residual,
            status=solution.status,
            valid=solution.converged,
            Pns=solution.Pns,
            zones=solution.zones,
            message=message,
        ))
    return points


def _invalid_point(angle: float, load: float, message: str) -> InteractionPoint:
    return InteractionPoint(
        angle=angle, target=load, Pn=np.nan, Mx=np.nan, My=np.nan, c=np.nan,
        residual=np.nan, status=None, valid=False, message=message,
    )
