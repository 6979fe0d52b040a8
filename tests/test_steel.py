import logging

import numpy as np
import pytest

from polycolumn.errors import SectionInputError
from polycolumn.shapes import Point
from polycolumn.steel import RebarLine, Reinforcement, get_rebar_area


def test_rebar_line_spacing():
    line = RebarLine((0, 0), (9, 3), 4, 0.44)
    np.testing.assert_allclose(line.coordinates(), [[0, 0], [3, 1], [6, 2], [9, 3]])
    assert isinstance(line.start, Point)


def test_single_bar_sits_at_start():
    line = RebarLine((1, 2), (5, 5), 1, 0.79)
    np.testing.assert_allclose(line.coordinates(), [[1, 2]])


def test_rebar_line_validation():
    with pytest.raises(SectionInputError):
        RebarLine((0, 0), (1, 0), 0, 0.2)
    with pytest.raises(SectionInputError):
        RebarLine((0, 0), (1, 0), 2, 0.0)
    with pytest.raises(SectionInputError):
        get_rebar_area(13)
    assert get_rebar_area(8) == 0.79


def test_shared_corners_are_counted_once(caplog):
    """Four perimeter lines meeting at their ends give one bar per distinct location."""
    lines = [
        RebarLine((2, 2), (10, 2), 3, 0.79),
        RebarLine((10, 2), (10, 10), 3, 0.79),
        RebarLine((10, 10), (2, 10), 3, 0.79),
        RebarLine((2, 10), (2, 2), 3, 0.79),
    ]
    with caplog.at_level(logging.INFO, logger="polycolumn.steel"):
        bars = Reinforcement.from_lines(lines)

    assert len(bars) == 8
    assert np.isclose(bars.total_area, 8 * 0.79)
    assert len(np.unique(bars.coordinates, axis=0)) == 8
    assert "Removed 4 duplicate" in caplog.text


def test_deduplication_keeps_first_occurrence_order():
    lines = [
        RebarLine((0, 0), (4, 0), 3, 1.0),
        RebarLine((4, 0 + 1e-9), (4, 4), 2, 2.0),
    ]
    bars = Reinforcement.from_lines(lines)

    np.testing.assert_allclose(bars.coordinates, [[0, 0], [2, 0], [4, 0], [4, 4]])
    # The bar kept at the shared corner is the one of the first line
    np.testing.assert_allclose(bars.area, [1.0, 1.0, 1.0, 2.0])


def test_deduplication_is_idempotent(square_section):
    bars = square_section.reinforcement
    lines = [RebarLine((x, y), (x, y), 1, a) for x, y, a in zip(bars.x, bars.y, bars.area)]
    again = Reinforcement.from_lines(lines)
    np.testing.assert_allclose(again.coordinates, bars.coordinates)


def test_reinforcement_validation():
    with pytest.raises(SectionInputError):
        Reinforcement([0, 1], [0, 1], [1.0])
    with pytest.raises(SectionInputError):
        Reinforcement([0], [0], [-1.0])
    assert len(Reinforcement.from_lines([])) == 0


def test_rotation_returns_new_layout():
    bars = Reinforcement([1.0, 0.0], [0.0, 2.0], [1.0, 0.5])
    rotated = bars.rotate(90)

    np.testing.assert_allclose(rotated.coordinates, [[0.0, 1.0], [-2.0, 0.0]], atol=1e-12)
    np.testing.assert_allclose(bars.coordinates, [[1.0, 0.0], [0.0, 2.0]])
    np.testing.assert_allclose(rotated.area, bars.area)
