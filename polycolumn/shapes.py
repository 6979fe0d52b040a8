##########################################
# Shapes Module
# Written by: Hossein Karagah
# Date: 2026-10-12
# Description: This module provides the geometric kernel for arbitrary polygonal column sections: points, simple polygons, rotations, area/centroid formulas and the compression zone clip.
##########################################
from __future__ import annotations

from dataclasses import dataclass
from math import sin, cos, radians
from typing import Union, Tuple, Optional, List, Sequence

import matplotlib.axes
import matplotlib.pyplot as plt
import numpy as np
from shapely import geometry as geom
from shapely.validation import explain_validity

from polycolumn.errors import SectionInputError, DegenerateGeometryError

# Compression zone parts smaller than this fraction of the section area are dropped
ZONE_AREA_TOLERANCE = 1e-12


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def rotate(self, angle_deg: float, pivot: Optional[Union['Point', Tuple[float, float]]] = None) -> 'Point':
        """Returns a new point rotated counterclockwise by the given angle in degrees around a pivot (origin by default)."""
        if isinstance(pivot, tuple):
            pivot = Point(*pivot)
        return rotate2D(self, TransParams(angle_deg=angle_deg, pivot=pivot))

    def to_array(self) -> np.ndarray:
        return np.array([[self.x], [self.y]])

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self):
        return f"Point(x={self.x}, y={self.y})"


@dataclass
class TransParams:
    angle_deg: Optional[float] = None
    pivot: Optional[Point] = None

    def __repr__(self):
        return f"TransParams(angle_deg={self.angle_deg}, pivot={self.pivot})"


class Polygon:
    """A simple (non self-intersecting) polygon given by its vertices.

    The vertex array is stored read-only. Every transformation returns a new polygon
    so a base geometry can be shared safely between many angle sweeps.
    """

    def __init__(self, vertices: Union[Sequence[Tuple[float, float]], np.ndarray]) -> None:
        """
        Args:
            vertices (Union[Sequence[Tuple[float, float]], np.ndarray]): (n, 2) vertex coordinates in
                either winding order. A repeated closing vertex is dropped.

        Raises:
            SectionInputError: If fewer than 3 distinct vertices are given or coordinates are not finite.
            DegenerateGeometryError: If the polygon is self-intersecting or has no area.
        """
        vertices = np.array(vertices, dtype=float)
        if vertices.ndim != 2 or vertices.shape[1] != 2:
            raise SectionInputError(f"Polygon vertices must be an (n, 2) array, got shape {vertices.shape}.")
        if len(vertices) > 1 and np.allclose(vertices[0], vertices[-1]):
            vertices = vertices[:-1]
        if len(vertices) < 3:
            raise SectionInputError(f"A polygon needs at least 3 vertices, got {len(vertices)}.")
        if not np.all(np.isfinite(vertices)):
            raise SectionInputError("Polygon vertices must be finite numbers.")

        shape = geom.Polygon(vertices)
        if not shape.is_valid:
            raise DegenerateGeometryError(f"Polygon is not simple: {explain_validity(shape)}.")
        if shape.area <= 0.0:
            raise DegenerateGeometryError("Polygon has zero area.")

        vertices.setflags(write=False)
        self._vertices = vertices
        self._shape = shape

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    @property
    def area(self) -> float:
        return polygon_area(self._vertices)

    @property
    def centroid(self) -> Point:
        return Point(*polygon_centroid(self._vertices))

    @property
    def x_min(self) -> float:
        return float(self._vertices[:, 0].min())

    @property
    def x_max(self) -> float:
        return float(self._vertices[:, 0].max())

    @property
    def y_min(self) -> float:
        """Returns the minimum y coordinate, the extreme tension fiber."""
        return float(self._vertices[:, 1].min())

    @property
    def y_max(self) -> float:
        """Returns the maximum y coordinate, the extreme compression fiber."""
        return float(self._vertices[:, 1].max())

    @property
    def depth(self) -> float:
        """Returns the extent of the polygon along the y axis."""
        return self.y_max - self.y_min

    def to_shapely(self) -> geom.Polygon:
        return self._shape

    def rotate(self, angle_deg: float, pivot: Optional[Union[Point, Tuple[float, float]]] = None) -> 'Polygon':
        """Returns a new polygon rotated counterclockwise by angle_deg around the pivot (origin by default)."""
        return Polygon(rotate_coordinates(self._vertices, angle_deg, pivot))

    def plot(self, ax: matplotlib.axes.Axes = None, **kwargs) -> matplotlib.axes.Axes:
        if ax is None:
            _, ax = plt.subplots(figsize=kwargs.get('fig_size', (4, 4)))
        closed = np.vstack([self._vertices, self._vertices[:1]])
        ax.fill(
            closed[:, 0], closed[:, 1],
            facecolor=kwargs.get('facecolor', 'lightgray'),
            edgecolor=kwargs.get('edgecolor', 'black'),
            linewidth=kwargs.get('linewidth', 1),
            alpha=kwargs.get('alpha'),
            zorder=kwargs.get('zorder'),
        )
        ax.set_aspect('equal')
        return ax

    def __repr__(self):
        return f"Polygon(n_vertices={len(self)}, area={self.area:.3f})"


# Functions =========================================================

def get_2D_rotation_matrix(angle: float) -> np.ndarray:
    """Returns a 2D rotation matrix for a given angle in degrees."""
    angle_rad = radians(angle)
    return np.array([[cos(angle_rad), -sin(angle_rad)],
                     [sin(angle_rad), cos(angle_rad)]])


def rotate2D(point: Point, transform_params: TransParams) -> Point:
    """Rotate a point by a given angle in degrees around a pivot point."""
    pivot = transform_params.pivot if transform_params.pivot else Point(0, 0)
    angle_deg = transform_params.angle_deg if transform_params.angle_deg else 0
    rotation_matrix = get_2D_rotation_matrix(angle_deg)

    point = point.to_array() - pivot.to_array()
    point = rotation_matrix @ point
    point = point + pivot.to_array()

    return Point(float(point[0, 0]), float(point[1, 0]))


def rotate_coordinates(coords: np.ndarray, angle_deg: float, pivot: Optional[Union[Point, Tuple[float, float]]] = None) -> np.ndarray:
    """Rotates an (n, 2) array of coordinates counterclockwise by angle_deg around a pivot (origin by default)."""
    if isinstance(pivot, tuple):
        pivot = Point(*pivot)
    pivot = np.array(pivot.to_tuple()) if pivot else np.zeros(2)
    coords = np.asarray(coords, dtype=float).reshape(-1, 2)
    rotation_matrix = get_2D_rotation_matrix(angle_deg)
    return (coords - pivot) @ rotation_matrix.T + pivot


def _shifted_xy(vertices: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    # Shoelace sums are taken relative to the first vertex; far from the origin the raw
    # products cancel to zero for small polygons
    vertices = np.asarray(vertices, dtype=float)
    x, y = (vertices - vertices[0]).T
    return x, y


def polygon_signed_area(vertices: np.ndarray) -> float:
    """Returns the shoelace area of a vertex loop, positive for counterclockwise winding."""
    x, y = _shifted_xy(vertices)
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def polygon_area(vertices: np.ndarray) -> float:
    """Returns the area of a simple polygon regardless of its winding direction."""
    return abs(polygon_signed_area(vertices))


def polygon_centroid(vertices: np.ndarray) -> Tuple[float, float]:
    """Returns the centroid (x, y) of a simple polygon.

    The first moments and the signed area change sign together when the winding is
    reversed, so the result does not depend on the vertex order.

    Raises:
        DegenerateGeometryError: If the polygon has zero area.
    """
    origin = np.asarray(vertices, dtype=float)[0]
    x, y = _shifted_xy(vertices)
    x_next, y_next = np.roll(x, -1), np.roll(y, -1)
    cross = x * y_next - x_next * y
    signed_area = 0.5 * cross.sum()
    if signed_area == 0.0:
        raise DegenerateGeometryError("Centroid is undefined for a polygon with zero area.")
    cx = ((x + x_next) * cross).sum() / (6.0 * signed_area)
    cy = ((y + y_next) * cross).sum() / (6.0 * signed_area)
    return float(cx + origin[0]), float(cy + origin[1])


def region_area(polygons: List[Polygon]) -> float:
    """Returns the total area of a possibly disconnected region."""
    return sum(polygon.area for polygon in polygons)


def region_centroid(polygons: List[Polygon]) -> Optional[Point]:
    """Returns the area-weighted centroid of a possibly disconnected region, None if empty."""
    if not polygons:
        return None
    areas = np.array([polygon.area for polygon in polygons])
    centroids = np.array([polygon.centroid.to_tuple() for polygon in polygons])
    cx, cy = (areas @ centroids) / areas.sum()
    return Point(float(cx), float(cy))


def compression_zone(shape: Polygon, depth: float) -> List[Polygon]:
    """Clips a section against the half-plane lying within `depth` of its extreme compression fiber.

    The extreme compression fiber is the maximum y coordinate of the polygon. The cut line is
    y = y_max - depth and everything above it is kept. The clip is an exact polygon intersection,
    so a non-convex section may split into several disjoint regions.

    Args:
        shape (Polygon): Section outline in the bending frame.
        depth (float): Cut depth measured downward from the extreme compression fiber.

    Returns:
        List[Polygon]: Compression regions. Empty if depth <= 0 or the clipped area is negligible,
            the whole section if depth reaches the far fiber.

    Raises:
        SectionInputError: If depth is not a finite number.
        DegenerateGeometryError: If a cut strictly inside the section yields no area.
    """
    if not np.isfinite(depth):
        raise SectionInputError(f"Cut depth must be finite, got {depth}.")
    if depth <= 0.0:
        return []
    if depth >= shape.depth:
        return [shape]

    y_cut = shape.y_max - depth
    pad = shape.depth + (shape.x_max - shape.x_min) + 1.0
    half_plane = geom.box(shape.x_min - pad, y_cut, shape.x_max + pad, shape.y_max + pad)
    clipped = shape.to_shapely().intersection(half_plane)

    # Slivers below this area are rounding noise of a cut grazing a vertex
    min_area = ZONE_AREA_TOLERANCE * shape.area
    zones = [
        Polygon(np.asarray(part.exterior.coords))
        for part in _iter_polygons(clipped)
        if part.area > min_area
    ]
    if not zones and clipped.area > min_area:
        raise DegenerateGeometryError(
            f"Cut at depth {depth} inside a section of depth {shape.depth} produced no compression area."
        )
    return zones


def _iter_polygons(shape) -> List[geom.Polygon]:
    """Flattens a shapely intersection result into its polygonal parts."""
    if shape.is_empty:
        return []
    if isinstance(shape, geom.Polygon):
        return [shape]
    if hasattr(shape, 'geoms'):
        parts = []
        for part in shape.geoms:
            parts.extend(_iter_polygons(part))
        return parts
    # Points and lines touching the cut carry no area
    return []
