import pytest

from polycolumn.concrete import ReinforcedSection
from polycolumn.materials import Materials
from polycolumn.shapes import Polygon
from polycolumn.steel import RebarLine, Reinforcement


@pytest.fixture
def mat():
    # 4 ksi concrete (beta1 = 0.85), Grade 60 steel
    return Materials.from_values(fc=4.0, fy=60.0, Es=29000.0, eps_cu=0.003)


@pytest.fixture
def rect_section(mat):
    """10 in wide x 20 in deep with two 1.0 in^2 bars 2.5 in above the bottom face."""
    shape = Polygon([(0, 0), (10, 0), (10, 20), (0, 20)])
    bars = Reinforcement.from_lines([RebarLine((2.5, 2.5), (7.5, 2.5), 2, 1.0)])
    return ReinforcedSection(shape, mat, bars)


@pytest.fixture
def square_section(mat):
    """12 in square with 8 #8 bars placed by four perimeter lines sharing their corners."""
    shape = Polygon([(0, 0), (12, 0), (12, 12), (0, 12)])
    lines = [
        RebarLine.from_size((2, 2), (10, 2), 3, 8),
        RebarLine.from_size((10, 2), (10, 10), 3, 8),
        RebarLine.from_size((10, 10), (2, 10), 3, 8),
        RebarLine.from_size((2, 10), (2, 2), 3, 8),
    ]
    return ReinforcedSection(shape, mat, Reinforcement.from_lines(lines))


@pytest.fixture
def l_shape():
    return Polygon([(0, 0), (20, 0), (20, 6), (6, 6), (6, 20), (0, 20)])


@pytest.fixture
def l_section(mat, l_shape):
    lines = [
        RebarLine.from_size((2, 2), (18, 2), 5, 8),
        RebarLine.from_size((2, 2), (2, 18), 5, 8),
        RebarLine.from_size((18, 4), (4, 4), 2, 8),
        RebarLine.from_size((4, 18), (4, 4), 2, 8),
    ]
    return ReinforcedSection(l_shape, mat, Reinforcement.from_lines(lines))


@pytest.fixture
def u_shape():
    """Channel open at the top: a cut below the rim splits it into two legs."""
    return Polygon([(0, 0), (12, 0), (12, 12), (8, 12), (8, 4), (4, 4), (4, 12), (0, 12)])
