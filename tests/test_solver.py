import numpy as np
import pytest

import polycolumn.solver as solver_module
from polycolumn.concrete import (
    ReinforcedSection,
    compute_section_capacity,
    nominal_compressive_strength,
    nominal_tensile_strength,
)
from polycolumn.shapes import Polygon
from polycolumn.steel import Reinforcement
from polycolumn.solver import (
    EquilibriumSolver,
    SolverConfig,
    SolverStatus,
    solve_neutral_axis,
)
from polycolumn.transform import rotate_section


def test_pure_flexure_of_rectangular_section(rect_section):
    """
    Pure bending of the 10 x 20 section with 2 in^2 of tension steel.

    T = 60 * 2 = 120 kips, a = 120 / (0.85 * 4 * 10) = 3.529 in,
    Mn = T * (d - a / 2) = 120 * (17.5 - 1.765) = 1888.2 kip-in.
    """
    solution = solve_neutral_axis(0.0, rect_section, 0.0)

    a = 120.0 / (0.85 * 4.0 * 10.0)
    Mn = 120.0 * (17.5 - a / 2)
    assert solution.status is SolverStatus.CONVERGED
    assert np.isclose(abs(solution.Mnx), Mn, rtol=0.01)
    assert np.isclose(solution.Mny, 0.0, atol=1e-6)
    assert np.isclose(solution.c, a / 0.85, rtol=0.01)


def test_pure_flexure_about_the_other_axis(square_section):
    """A quarter turn of a symmetric section moves the same flexural capacity onto the y axis."""
    about_x = solve_neutral_axis(0.0, square_section, 0.0)
    about_y = solve_neutral_axis(0.0, rotate_section(square_section, 90.0), 90.0)

    assert about_x.converged and about_y.converged
    assert np.isclose(about_y.Mnx, 0.0, atol=1e-6)
    assert np.isclose(abs(about_y.Mny), abs(about_x.Mnx), rtol=1e-6)
    assert np.isclose(about_y.Mn, np.hypot(about_y.Mnx, about_y.Mny))


def test_target_load_in_linear_range(rect_section):
    # Bars yield in tension, so Pn = 28.9 c - 120 for c below ~10.4 in
    solution = solve_neutral_axis(100.0, rect_section)

    assert solution.status is SolverStatus.CONVERGED
    assert np.isclose(solution.c, 220.0 / 28.9, rtol=1e-4)
    assert abs(solution.residual) <= SolverConfig().tolerance(100.0)
    assert solution.angle == 0.0
    assert len(solution.Pns) == 2


@pytest.mark.parametrize("angle", [0.0, 25.0, 90.0, 200.0, 315.0])
def test_equilibrium_round_trip(l_section, angle):
    """Re-evaluating at the returned depth reproduces the target, or the point is flagged."""
    config = SolverConfig()
    rotated = rotate_section(l_section, angle)
    P0 = nominal_compressive_strength(l_section).Pn

    for target in np.linspace(-0.9 * 12 * 0.79 * 60.0, 0.9 * P0, 7):
        solution = solve_neutral_axis(target, rotated, angle, config)
        achieved = compute_section_capacity(rotated, solution.c).Pn
        assert np.isclose(achieved, solution.Pn)
        if solution.converged:
            assert abs(achieved - target) <= config.tolerance(target)
        else:
            assert solution.status in (SolverStatus.NOT_CONVERGED, SolverStatus.OUT_OF_RANGE)


def test_load_beyond_compressive_strength_is_out_of_range(rect_section):
    P0 = nominal_compressive_strength(rect_section).Pn
    solution = solve_neutral_axis(P0 + 100.0, rect_section)

    assert solution.status is SolverStatus.OUT_OF_RANGE
    assert np.isclose(solution.residual, -100.0)


def test_load_beyond_tensile_strength_is_out_of_range(rect_section):
    solution = solve_neutral_axis(-200.0, rect_section)

    assert solution.status is SolverStatus.OUT_OF_RANGE
    assert np.isclose(solution.Pn, -120.0)
    assert np.isclose(solution.residual, 80.0)


def test_axial_limits_are_reachable(rect_section):
    tension = solve_neutral_axis(-120.0, rect_section)
    assert tension.converged
    assert tension.c == 0.0

    P0 = nominal_compressive_strength(rect_section).Pn
    compression = solve_neutral_axis(P0, rect_section)
    assert compression.converged
    assert compression.c > rect_section.depth


def test_load_just_above_tensile_strength_on_rotated_section(square_section):
    """The bracket reaches c = 0, so Brent samples neutral axes that graze the rotated corner."""
    target = nominal_tensile_strength(square_section).Pn + 1e-8
    solution = solve_neutral_axis(target, rotate_section(square_section, 30.0), 30.0)

    assert solution.status is SolverStatus.CONVERGED
    assert abs(solution.residual) <= SolverConfig().tolerance(target)


@pytest.mark.parametrize("config", [SolverConfig(), SolverConfig(c_min_ratio=0.1, c_max_ratio=0.16)])
@pytest.mark.parametrize("target", [66.0, 70.4, 75.0])
def test_target_across_drop_in_axial_capacity(mat, config, target):
    """
    10 x 20 section with a 4 in^2 bar 2.5 in and a 1 in^2 bar 17.5 in below the top face.

    The top bar enters the stress block at c = 2.5 / 0.85 = 2.941 in, where
    Pn = 85.0 + 4 * 13.04 - 60 = 77.2 kips. Its displaced concrete, 4 * 3.4 = 13.6 kips, then drops
    Pn to 63.6 kips. Targets inside that drop must still land on a continuous crossing.
    """
    shape = Polygon([(0, 0), (10, 0), (10, 20), (0, 20)])
    section = ReinforcedSection(shape, mat, Reinforcement([5.0, 5.0], [17.5, 2.5], [4.0, 1.0]))
    solution = solve_neutral_axis(target, section, config=config)

    tol = config.tolerance(target)
    assert solution.status is SolverStatus.CONVERGED
    assert abs(solution.residual) <= tol
    assert abs(compute_section_capacity(section, solution.c).Pn - target) <= tol


def test_budget_exhaustion_returns_best_point(rect_section, monkeypatch):
    """A root solve that gives up is reported, not raised."""

    class GaveUp:
        converged = False
        iterations = 0
        flag = 'convergence error'

    monkeypatch.setattr(solver_module, "root_scalar", lambda *args, **kwargs: GaveUp())
    solver = EquilibriumSolver(rect_section)
    solution = solver.solve(100.0)

    assert solution.status is SolverStatus.NOT_CONVERGED
    # Both bracket ends plus the fallback grid were evaluated; the best grid point is kept
    assert solution.n_evaluations == 2 + SolverConfig().grid_points
    step = 0.99 * rect_section.depth / (SolverConfig().grid_points - 1)
    assert SolverConfig().tolerance(100.0) < abs(solution.residual) < 28.9 * step
    assert np.isclose(solution.residual, solution.Pn - 100.0)


def test_small_nonzero_target_uses_root_solve(rect_section):
    solution = solve_neutral_axis(1.0, rect_section)
    assert solution.converged
    assert np.isclose(solution.Pn, 1.0, atol=SolverConfig().atol)


def test_zero_load_tolerance_dispatches_to_pure_moment(rect_section):
    config = SolverConfig(zero_load_tolerance=0.5)
    solution = solve_neutral_axis(0.3, rect_section, config=config)

    assert solution.target == 0.3
    assert np.isclose(solution.residual, solution.Pn - 0.3)
    assert solution.n_evaluations == config.pure_moment_points


@pytest.mark.parametrize("kwargs", [
    dict(rtol=0.0),
    dict(atol=-1.0),
    dict(max_iterations=0),
    dict(expansion_factor=1.0),
    dict(c_min_ratio=1.5),
    dict(grid_points=1),
    dict(pure_moment_c_range=(0.5, 0.1)),
    dict(pure_moment_threshold=0.0),
])
def test_invalid_solver_config(kwargs):
    with pytest.raises(ValueError):
        SolverConfig(**kwargs)


def test_tolerance_has_absolute_floor():
    config = SolverConfig(rtol=1e-4, atol=1e-3)
    assert config.tolerance(1000.0) == pytest.approx(0.1)
    assert config.tolerance(1.0) == pytest.approx(1e-3)


def test_solver_rejects_other_types():
    with pytest.raises(TypeError):
        EquilibriumSolver("not a section")
