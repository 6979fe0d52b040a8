"""Biaxial interaction surfaces of reinforced concrete columns of arbitrary polygonal section."""
import logging

from polycolumn.errors import (
    PolyColumnError,
    SectionInputError,
    DegenerateGeometryError,
    CapacityEvaluationError,
)
from polycolumn.shapes import Point, Polygon, compression_zone, polygon_area, polygon_centroid
from polycolumn.materials import ACIConcrete, ElasticPlasticSteel, Materials, aci_beta1
from polycolumn.steel import RebarLine, Reinforcement, get_rebar_area
from polycolumn.concrete import (
    ReinforcedSection,
    CapacityPoint,
    compute_section_capacity,
    nominal_compressive_strength,
    nominal_tensile_strength,
)
from polycolumn.transform import rotate_section, moments_to_global
from polycolumn.solver import (
    SolverConfig,
    SolverStatus,
    NeutralAxisSolution,
    EquilibriumSolver,
    solve_neutral_axis,
)
from polycolumn.interaction import (
    InteractionPoint,
    InteractionSurface,
    angle_range,
    load_range,
    generate_interaction_surface,
    generate_interaction_diagram,
    generate_meridian,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
