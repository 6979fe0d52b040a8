##########################################
# Transform Module
# Written by: Hossein Karagah
# Date: 2026-10-13
# Description: This module rotates column sections into the frame of a bending angle and maps the moments found in that frame back to the fixed section axes.
##########################################
from typing import Tuple

import numpy as np

from polycolumn.concrete import ReinforcedSection
from polycolumn.shapes import get_2D_rotation_matrix


def rotate_section(section: ReinforcedSection, angle_deg: float) -> ReinforcedSection:
    """Rotates a section so that bending at angle_deg compresses its maximum y fiber.

    A new section is returned; outline, bars and plastic centroid of the original are untouched.

    Args:
        section (ReinforcedSection): Un-rotated section.
        angle_deg (float): Bending angle in degrees, counterclockwise.

    Returns:
        ReinforcedSection: Rotated copy of the section.
    """
    return section.rotate(angle_deg)


def moments_to_global(Mnx: float, Mny: float, angle_deg: float) -> Tuple[float, float]:
    """Maps moments computed in a rotated section frame back to the fixed section axes.

    The moment vector is rotated with the same matrix used for the geometry; the global My is the
    negation of the rotated second component.

    Args:
        Mnx (float): Moment about the x axis of the rotated frame.
        Mny (float): Moment about the y axis of the rotated frame.
        angle_deg (float): Rotation angle of the frame in degrees.

    Returns:
        Tuple[float, float]: (Mx, My) about the fixed axes.
    """
    Mx, My = get_2D_rotation_matrix(angle_deg) @ np.array([Mnx, Mny])
    return float(Mx), float(-My)
