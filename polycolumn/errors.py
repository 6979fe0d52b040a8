##########################################
# Errors Module
# Written by: Hossein Karagah
# Date: 2026-10-12
# Description: This module defines the exceptions raised by the column section analysis modules.
##########################################


class PolyColumnError(Exception):
    """Base class for all errors raised by the column section analysis."""


class SectionInputError(PolyColumnError, ValueError):
    """Raised when section, material or reinforcement input is invalid.
    The whole request is rejected before any geometry work begins."""


class DegenerateGeometryError(PolyColumnError, ValueError):
    """Raised when a polygon is self-intersecting or has no area, or when a clip
    that must produce a compression zone returns nothing."""


class CapacityEvaluationError(PolyColumnError, ArithmeticError):
    """Raised when a capacity evaluation produces a non-finite result."""
