################################
# Equilibrium Solver Module
# Written by: Hossein Karagah
# Date: 2026-10-14
# Description: This module finds the neutral axis depth at which a rotated column section carries a target axial load, including the dedicated search for the pure flexure point.
################################
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
from scipy.optimize import root_scalar

from polycolumn.concrete import ReinforcedSection, CapacityPoint, compute_section_capacity
from polycolumn.shapes import Polygon
from polycolumn.transform import moments_to_global

logger = logging.getLogger(__name__)

# Bracket width, relative to the section depth, at which the root solve stops refining c
ROOT_XTOL_RATIO = 1e-12


class SolverStatus(Enum):
    """Outcome of a neutral axis search."""
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"
    OUT_OF_RANGE = "out_of_range"


@dataclass
class SolverConfig:
    rtol: float = 1e-4
    atol: float = 1e-3
    max_iterations: int = 100
    max_expansions: int = 10
    expansion_factor: float = 2.0
    c_min_ratio: float = 0.01
    c_max_ratio: float = 1.0
    grid_points: int = 400
    zero_load_tolerance: float = 1e-9
    pure_moment_points: int = 2000
    pure_moment_c_range: Tuple[float, float] = (0.005, 0.99)
    pure_moment_threshold: float = 0.001

    def __post_init__(self):
        if self.rtol <= 0 or self.atol <= 0:
            raise ValueError("Solver tolerances must be positive.")
        if self.max_iterations < 1 or self.max_expansions < 0:
            raise ValueError("max_iterations must be at least 1 and max_expansions non-negative.")
        if self.expansion_factor <= 1:
            raise ValueError(f"expansion_factor must be greater than 1, got {self.expansion_factor}.")
        if not 0 < self.c_min_ratio < self.c_max_ratio:
            raise ValueError("The initial bracket must satisfy 0 < c_min_ratio < c_max_ratio.")
        if self.grid_points < 2 or self.pure_moment_points < 2:
            raise ValueError("Grid searches need at least 2 points.")
        lo, hi = self.pure_moment_c_range
        if not 0 < lo < hi:
            raise ValueError(f"Invalid pure moment range {self.pure_moment_c_range}.")
        if self.pure_moment_threshold <= 0 or self.zero_load_tolerance < 0:
            raise ValueError("Pure moment threshold must be positive and zero load tolerance non-negative.")

    def tolerance(self, target: float) -> float:
        """Returns the admissible axial residual for a target load."""
        return max(self.rtol * abs(target), self.atol)


@dataclass
class NeutralAxisSolution:
    """Result of a neutral axis search. Moments are about the fixed (un-rotated) section axes."""
    target: float
    angle: float
    c: float
    Pn: float
    Mnx: float
    Mny: float
    Pns: np.ndarray
    residual: float
    status: SolverStatus
    n_evaluations: int
    zones: List[Polygon] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.status is SolverStatus.CONVERGED

    @property
    def Mn(self) -> float:
        return float(np.hypot(self.Mnx, self.Mny))


class _Objective:
    """Axial residual f(c) = Pn(c) - target that remembers its lowest-residual evaluation."""

    def __init__(self, section: ReinforcedSection, target: float):
        self.section = section
        self.target = target
        self.n_evaluations = 0
        self.best: Optional[CapacityPoint] = None

    def __call__(self, neutral_depth: float) -> float:
        point = compute_section_capacity(self.section, float(neutral_depth))
        self.n_evaluations += 1
        if self.best is None or abs(point.Pn - self.target) < abs(self.best.Pn - self.target):
            self.best = point
        return point.Pn - self.target


class EquilibriumSolver:
    def __init__(self, section: ReinforcedSection, angle_deg: float = 0.0, config: Optional[SolverConfig] = None):
        """
        Args:
            section (ReinforcedSection): Section already rotated to the bending frame (see rotate_section).
            angle_deg (float, optional): Rotation angle of that frame, used to map moments back. Defaults to 0.
            config (Optional[SolverConfig], optional): Solver settings. Defaults to SolverConfig().
        """
        if not isinstance(section, ReinforcedSection):
            raise TypeError("'section' must be an instance of 'ReinforcedSection'.")
        self.section = section
        self.angle = angle_deg
        self.config = config if config is not None else SolverConfig()

    def solve(self, target: float) -> NeutralAxisSolution:
        """Finds the neutral axis depth at which the section carries the target axial load.

        A bracket spanning the section depth is expanded outward until the residual changes sign,
        then refined with Brent's method. If that misses the tolerance, or no sign change is found, a
        dense grid is scanned and each sign change on it is refined in turn; without any sign change the
        closest point is returned as out of range. Targets within the zero load tolerance use the pure
        moment search instead.

        Args:
            target (float): Target axial load, compression positive.

        Returns:
            NeutralAxisSolution: Best point found with its residual and status.
        """
        config = self.config
        if abs(target) <= config.zero_load_tolerance:
            return self.solve_pure_moment(target)

        objective = _Objective(self.section, target)
        tol = config.tolerance(target)
        depth = self.section.depth
        c_lo, c_hi = config.c_min_ratio * depth, config.c_max_ratio * depth
        f_lo, f_hi = objective(c_lo), objective(c_hi)

        expansions = 0
        while f_lo * f_hi > 0 and expansions < config.max_expansions:
            width = (c_hi - c_lo) * config.expansion_factor
            if f_lo > 0:  # even the shallowest depth carries too much compression
                if c_lo <= 0:
                    break  # fully tensioned already, nothing lower to try
                c_lo = max(c_hi - width, 0.0)
                f_lo = objective(c_lo)
            else:
                c_hi = c_lo + width
                f_hi = objective(c_hi)
            expansions += 1
            logger.debug("Bracket expanded to [%g, %g] for target %g.", c_lo, c_hi, target)

        if f_lo * f_hi <= 0:
            self._refine(objective, c_lo, c_hi, f_lo, f_hi)
            if abs(objective.best.Pn - target) <= tol:
                status = SolverStatus.CONVERGED
            else:
                # Settled on a drop of Pn where the stress block passes a bar; look for a continuous crossing
                status = self._grid_fallback(objective, c_lo, c_hi, tol)
        else:
            status = self._grid_fallback(objective, c_lo, c_hi, tol)

        return self._solution(target, objective.best, status, objective.n_evaluations)

    def solve_pure_moment(self, target: float = 0.0) -> NeutralAxisSolution:
        """Finds the flexural capacity at zero axial load.

        A dense grid of depths is evaluated; among the depths whose |Pn| is below the threshold the
        one with the largest resultant moment is selected.

        Args:
            target (float, optional): Requested load, within the zero load tolerance. Defaults to 0.
            The residual is reported against it.

        Returns:
            NeutralAxisSolution: Pure flexure point with its residual and status.
        """
        config = self.config
        lo, hi = config.pure_moment_c_range
        depths = np.linspace(lo * self.section.depth, hi * self.section.depth, config.pure_moment_points)
        points = [compute_section_capacity(self.section, c) for c in depths]

        Pn = np.array([point.Pn for point in points])
        Mn = np.array([point.Mn for point in points])
        threshold = max(config.pure_moment_threshold * np.abs(Pn).max(), config.pure_moment_threshold)
        near_zero = np.flatnonzero(np.abs(Pn) < threshold)
        if near_zero.size == 0:
            near_zero = np.array([np.argmin(np.abs(Pn))])
        best = points[near_zero[np.argmax(Mn[near_zero])]]

        if Pn[0] * Pn[-1] > 0:
            status = SolverStatus.OUT_OF_RANGE
        elif abs(best.Pn) < threshold:
            status = SolverStatus.CONVERGED
        else:
            status = SolverStatus.NOT_CONVERGED
        return self._solution(target, best, status, len(points))

    def _refine(self, objective: _Objective, c_lo: float, c_hi: float, f_lo: float, f_hi: float):
        if f_lo == 0 or f_hi == 0:
            return
        result = root_scalar(
            objective, bracket=[c_lo, c_hi], method='brentq',
            xtol=ROOT_XTOL_RATIO * max(self.section.depth, 1.0),
            maxiter=self.config.max_iterations,
        )
        if not result.converged:
            logger.debug("Root solve stopped after %d iterations: %s", result.iterations, result.flag)

    def _grid_fallback(self, objective: _Objective, c_lo: float, c_hi: float, tol: float) -> SolverStatus:
        logger.debug("Scanning a grid over [%g, %g] for target %g.", c_lo, c_hi, objective.target)
        depths = np.linspace(c_lo, c_hi, self.config.grid_points)
        residuals = np.array([objective(c) for c in depths])

        crossings = np.flatnonzero(residuals[:-1] * residuals[1:] <= 0)
        for i in crossings:
            self._refine(objective, depths[i], depths[i + 1], residuals[i], residuals[i + 1])
            if abs(objective.best.Pn - objective.target) <= tol:
                return SolverStatus.CONVERGED
        if crossings.size:
            return SolverStatus.NOT_CONVERGED

        if abs(objective.best.Pn - objective.target) <= tol:
            return SolverStatus.CONVERGED
        return SolverStatus.OUT_OF_RANGE

    def _solution(self, target: float, point: CapacityPoint, status: SolverStatus, n_evaluations: int) -> NeutralAxisSolution:
        Mnx, Mny = moments_to_global(point.Mnx, point.Mny, self.angle)
        return NeutralAxisSolution(
            target=target,
            angle=self.angle,
            c=point.c,
            Pn=point.Pn,
            Mnx=Mnx,
            Mny=Mny,
            Pns=point.Pns,
            residual=point.Pn - target,
            status=status,
            n_evaluations=n_evaluations,
            zones=point.zones,
        )


def solve_neutral_axis(target: float, section: ReinforcedSection, angle_deg: float = 0.0,
                       config: Optional[SolverConfig] = None) -> NeutralAxisSolution:
    """Solves a rotated section for the neutral axis depth carrying the target axial load.

    Args:
        target (float): Target axial load, compression positive.
        section (ReinforcedSection): Section already rotated to the bending frame.
        angle_deg (float, optional): Rotation angle of the frame in degrees. Defaults to 0.
        config (Optional[SolverConfig], optional): Solver settings. Defaults to None.

    Returns:
        NeutralAxisSolution: Neutral axis depth, achieved load, global moments and bar forces.
    """
    return EquilibriumSolver(section, angle_deg, config).solve(target)
