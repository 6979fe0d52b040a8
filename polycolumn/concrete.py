################################
# Concrete Section Module
# Written by: Hossein Karagah
# Date: 2026-10-13
# Description: This module provides the reinforced concrete column section of arbitrary polygonal shape and the strain compatibility evaluation of its axial and flexural capacity for a given neutral axis depth.
################################
from __future__ import annotations

import logging
from copy import copy
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from shapely import geometry as geom

from polycolumn.errors import SectionInputError, CapacityEvaluationError
from polycolumn.materials import Materials
from polycolumn.shapes import Point, Polygon, compression_zone
from polycolumn.steel import Reinforcement

logger = logging.getLogger(__name__)


# Constants ##########################################

# Neutral axis depths at or below this fraction of the section depth are the fully tensioned limit
MIN_NEUTRAL_DEPTH_RATIO = 1e-9


# Main Classes ################################################

class ReinforcedSection:
    """A polygonal concrete section with its longitudinal bars and materials.

    The plastic centroid is computed once from the un-rotated geometry and is rotated, never
    recomputed, together with the outline and the bars.
    """

    def __init__(self, shape: Polygon, mat: Materials, reinforcement: Reinforcement,
                 plastic_centroid: Optional[Point] = None):
        """
        Args:
            shape (Polygon): Concrete outline.
            mat (Materials): Material constants.
            reinforcement (Reinforcement): Longitudinal bars, already deduplicated.
            plastic_centroid (Optional[Point], optional): Moment reference point. Defaults to None (computed).

        Raises:
            TypeError: If an argument has the wrong type.
            SectionInputError: If a bar lies outside the concrete outline.
        """
        if not isinstance(shape, Polygon):
            raise TypeError("'shape' must be an instance of 'Polygon'.")
        if not isinstance(mat, Materials):
            raise TypeError("'mat' must be an instance of 'Materials'.")
        if not isinstance(reinforcement, Reinforcement):
            raise TypeError("'reinforcement' must be an instance of 'Reinforcement'.")

        outline = shape.to_shapely()
        outside = [
            (x, y) for x, y in zip(reinforcement.x, reinforcement.y)
            if not outline.covers(geom.Point(x, y))
        ]
        if outside:
            raise SectionInputError(f"{len(outside)} bar(s) lie outside the concrete section, first at {outside[0]}.")

        self._shape = shape
        self._mat = mat
        self._reinforcement = reinforcement
        if plastic_centroid is None:
            self._warn_insufficient_cover()
            plastic_centroid = get_plastic_centroid(shape, mat, reinforcement)
        self._plastic_centroid = plastic_centroid

    @property
    def shape(self) -> Polygon:
        return self._shape

    @property
    def mat(self) -> Materials:
        return self._mat

    @property
    def reinforcement(self) -> Reinforcement:
        return self._reinforcement

    @property
    def plastic_centroid(self) -> Point:
        return self._plastic_centroid

    @property
    def gross_area(self) -> float:
        """Returns the gross area of the section."""
        return self._shape.area

    @property
    def depth(self) -> float:
        """Returns the section depth along the current bending axis (y)."""
        return self._shape.depth

    def rotate(self, angle_deg: float) -> 'ReinforcedSection':
        """Returns a new section with outline, bars and plastic centroid rotated counterclockwise about the origin.

        Args:
            angle_deg (float): Rotation angle in degrees.
        """
        rotated = copy(self)
        rotated._shape = self._shape.rotate(angle_deg)
        rotated._reinforcement = self._reinforcement.rotate(angle_deg)
        rotated._plastic_centroid = self._plastic_centroid.rotate(angle_deg)
        return rotated

    def _warn_insufficient_cover(self):
        cover = self._mat.cover
        if cover <= 0 or len(self._reinforcement) == 0:
            return
        boundary = self._shape.to_shapely().exterior
        distances = np.array([boundary.distance(geom.Point(x, y))
                              for x, y in zip(self._reinforcement.x, self._reinforcement.y)])
        n_close = int(np.sum(distances < cover - 1e-9))
        if n_close:
            logger.warning("%d bar(s) are closer than the %.3f cover to the section outline.", n_close, cover)

    def __repr__(self):
        return (f"ReinforcedSection(area={self.gross_area:.3f}, n_bars={len(self._reinforcement)}, "
                f"plastic_centroid={self._plastic_centroid})")


@dataclass
class CapacityPoint:
    """Axial force and moments of a section for one neutral axis depth.

    Moments are taken about the plastic centroid in the frame of the evaluated section:
    Mnx = sum F * (ypc - y), Mny = sum F * (xpc - x). Compression is positive.
    """
    c: float
    Pn: float
    Mnx: float
    Mny: float
    Pnc: float
    Pns: np.ndarray
    zones: List[Polygon] = field(default_factory=list)

    @property
    def Mn(self) -> float:
        """Returns the resultant moment magnitude."""
        return float(np.hypot(self.Mnx, self.Mny))


# Functions ################################################

def get_plastic_centroid(shape: Polygon, mat: Materials, reinforcement: Reinforcement) -> Point:
    """Returns the plastic centroid, the resultant location of the gross concrete capacity (0.85 fc Ag)
    and the yield capacity of all bars (fy As)."""
    concrete_force = mat.concrete.block_stress * shape.area
    bar_forces = mat.fy * reinforcement.area
    centroid = shape.centroid
    total = concrete_force + bar_forces.sum()
    x = (centroid.x * concrete_force + np.dot(reinforcement.x, bar_forces)) / total
    y = (centroid.y * concrete_force + np.dot(reinforcement.y, bar_forces)) / total
    return Point(float(x), float(y))


def get_rebar_depth(section: ReinforcedSection) -> np.ndarray:
    """Returns the distance of each bar below the extreme compression fiber."""
    return section.shape.y_max - section.reinforcement.y


def get_rebar_strain(section: ReinforcedSection, neutral_depth: float) -> np.ndarray:
    """Computes the bar strains of a linear strain profile with the ultimate concrete strain at the extreme fiber.

    Args:
        section (ReinforcedSection): Section in the bending frame.
        neutral_depth (float): Depth of the neutral axis from the extreme compression fiber.

    Returns:
        np.ndarray: Bar strains, compression positive. At or below the minimum neutral depth the
            section is fully tensioned and every strain is -inf.
    """
    depth = get_rebar_depth(section)
    if neutral_depth <= MIN_NEUTRAL_DEPTH_RATIO * section.depth:
        return np.full(depth.shape, -np.inf)
    return section.mat.eps_cu * (neutral_depth - depth) / neutral_depth


def compute_section_capacity(section: ReinforcedSection, neutral_depth: float) -> CapacityPoint:
    """Evaluates the axial capacity and moments of a section for a neutral axis depth.

    The concrete carries 0.85 fc over the compression zone of depth a = beta1 * c. Bars follow an
    elastic-perfectly plastic law; bars inside the stress block have the displaced concrete stress
    removed from their force.

    Args:
        section (ReinforcedSection): Section in the bending frame (compression on the maximum y side).
        neutral_depth (float): Depth c of the neutral axis from the extreme compression fiber.

    Returns:
        CapacityPoint: Axial force, moments, concrete force, bar forces and compression zones.

    Raises:
        CapacityEvaluationError: If the depth or the result is not finite.
    """
    if not np.isfinite(neutral_depth):
        raise CapacityEvaluationError(f"Neutral axis depth must be finite, got {neutral_depth}.")

    mat = section.mat
    block_depth = mat.beta1 * neutral_depth
    fully_tensioned = neutral_depth <= MIN_NEUTRAL_DEPTH_RATIO * section.depth
    zones = [] if fully_tensioned else compression_zone(section.shape, block_depth)

    stress = mat.steel.stress(get_rebar_strain(section, neutral_depth))
    in_block = (get_rebar_depth(section) < block_depth) & (not fully_tensioned)
    return _resultant(section, neutral_depth, zones, stress, in_block)


def nominal_compressive_strength(section: ReinforcedSection) -> CapacityPoint:
    """Calculates the nominal compressive strength of the section (P_o), the limit of the capacity as c grows without bound.

    The whole outline is in the stress block and every bar is at the stress of the ultimate concrete strain.

    Args:
        section (ReinforcedSection): Concrete section containing longitudinal rebars.

    Returns:
        CapacityPoint: Nominal compressive strength with 'c' set to np.inf.
    """
    n_bars = len(section.reinforcement)
    stress = np.full(n_bars, section.mat.steel.stress(section.mat.eps_cu))
    return _resultant(section, np.inf, [section.shape], stress, np.ones(n_bars, dtype=bool))


def nominal_tensile_strength(section: ReinforcedSection) -> CapacityPoint:
    """Calculates the nominal tensile strength of the section, all bars yielding in tension and no concrete.

    Args:
        section (ReinforcedSection): Concrete section containing longitudinal rebars.

    Returns:
        CapacityPoint: Nominal tensile strength (negative) with 'c' set to 0.
    """
    return compute_section_capacity(section, 0.0)


def _resultant(section: ReinforcedSection, neutral_depth: float, zones: List[Polygon],
               stress: np.ndarray, in_block: np.ndarray) -> CapacityPoint:
    mat = section.mat
    pc = section.plastic_centroid
    bars = section.reinforcement

    Pnc = Mnxc = Mnyc = 0.0
    for zone in zones:
        force = mat.concrete.block_stress * zone.area
        centroid = zone.centroid
        Pnc += force
        Mnxc += force * (pc.y - centroid.y)
        Mnyc += force * (pc.x - centroid.x)

    Pns = (stress - mat.concrete.block_stress * in_block) * bars.area
    Pn = Pnc + float(Pns.sum())
    Mnx = Mnxc + float(np.dot(Pns, pc.y - bars.y))
    Mny = Mnyc + float(np.dot(Pns, pc.x - bars.x))

    if not np.all(np.isfinite([Pn, Mnx, Mny])):
        raise CapacityEvaluationError(f"Capacity evaluation at c={neutral_depth} produced a non-finite result.")

    return CapacityPoint(c=neutral_depth, Pn=Pn, Mnx=Mnx, Mny=Mny, Pnc=Pnc, Pns=Pns, zones=zones)
