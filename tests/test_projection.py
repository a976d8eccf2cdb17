import math

import numpy as np
import pytest

from kinematic_feet.projection import (
    CollisionPhase,
    CollisionState,
    Surface,
    align_with_surface,
    detect_crease,
    project_on_surface,
    project_velocity,
    shift_to_surface,
)

UP = np.array([0.0, 1.0, 0.0])
SLOPE = np.array([0.0, 1.0, 1.0]) / math.sqrt(2.0)


def test_from_normal_walkable_and_not():
    assert Surface.from_normal(UP, math.pi / 4, UP).is_walkable
    assert not Surface.from_normal([1, 0, 0], math.pi / 4, UP).is_walkable
    with pytest.raises(ValueError):
        Surface.from_normal([0, 0, 0], math.pi / 4, UP)


def test_align_with_surface_keeps_length_and_lies_on_plane():
    v = np.array([0.0, 0.0, -3.0])
    aligned = align_with_surface(v, SLOPE, UP)
    assert np.linalg.norm(aligned) == pytest.approx(3.0)
    assert np.dot(aligned, SLOPE) == pytest.approx(0.0, abs=1e-12)


def test_project_on_surface_lies_on_plane():
    result = project_on_surface([1.0, 0.5, -2.0], SLOPE, UP)
    assert np.dot(result, SLOPE) == pytest.approx(0.0, abs=1e-12)


def test_shift_to_surface_keeps_horizontal():
    v = np.array([0.0, 0.0, -2.0])
    shifted = shift_to_surface(v, SLOPE, UP)
    assert np.dot(shifted, SLOPE) == pytest.approx(0.0, abs=1e-12)
    assert shifted[2] == pytest.approx(-2.0)


def test_shift_to_vertical_surface_returns_vertical_part():
    shifted = shift_to_surface([1.0, 2.0, 3.0], [1, 0, 0], UP)
    assert np.allclose(shifted, [0.0, 2.0, 0.0])


def test_obstruction_normal_is_horizontal_when_grounded():
    wall = Surface.from_normal([1.0, 0.2, 0.0], math.pi / 4, UP)
    obstruction = wall.obstruction_normal(UP, UP)
    assert np.dot(obstruction, UP) == pytest.approx(0.0, abs=1e-12)
    assert np.linalg.norm(obstruction) == pytest.approx(1.0)
    assert np.allclose(wall.obstruction_normal(None, UP), wall.normal)


def test_project_velocity_in_air_against_wall():
    v = np.array([-2.0, 1.0, 0.5])
    result = project_velocity(v, [1, 0, 0], False, None, UP)
    assert result[0] == pytest.approx(0.0)
    assert np.allclose(result[1:], v[1:])


def test_surface_project_velocity_grounded_wall_removes_normal_component():
    wall = Surface.from_normal([1.0, 0.0, 0.0], math.pi / 4, UP)
    result = wall.project_velocity([-1.0, 0.0, -1.0], UP, UP)
    assert np.dot(result, wall.normal) == pytest.approx(0.0, abs=1e-12)


def test_detect_crease_corner():
    a = Surface.from_normal([1, 0, 0], math.pi / 4, UP)
    b = Surface.from_normal([0, 0, 1], math.pi / 4, UP)
    current = np.array([0.0, -1.0, 0.0])
    crease = detect_crease(a, b, current, [-1.0, 0.0, -1.0], False)
    assert abs(np.dot(crease, UP)) == pytest.approx(1.0)
    assert np.dot(crease, current) >= 0.0


def test_detect_crease_parallel_planes():
    a = Surface.from_normal([1, 0, 0], math.pi / 4, UP)
    assert detect_crease(a, a, [0, 0, 1], [-1, 0, 0], False) is None


def test_collision_state_walkable_always_projects():
    state = CollisionState()
    floor = Surface.from_normal(UP, math.pi / 4, UP)
    result = state.update(floor, [1.0, -1.0, 0.0], [1.0, -1.0, 0.0], False, lambda v: v * 2)
    assert np.allclose(result, [2.0, -2.0, 0.0])
    assert state.phase is CollisionPhase.INITIAL


def test_collision_state_grounded_corner_stops():
    state = CollisionState()
    a = Surface.from_normal([1, 0, 0], math.pi / 4, UP)
    b = Surface.from_normal([0, 0, 1], math.pi / 4, UP)
    v = np.array([-1.0, 0.0, -1.0])
    state.update(b, v, v, True, lambda x: x)
    assert state.phase is CollisionPhase.PLANE
    result = state.update(a, [0.0, -1.0, 0.0], v, True, lambda x: x)
    assert np.allclose(result, np.zeros(3))
    assert state.phase is CollisionPhase.CORNER
    state.reset()
    assert state.phase is CollisionPhase.INITIAL


def test_collision_state_crease_then_corner():
    state = CollisionState(CollisionPhase.CREASE)
    wall = Surface.from_normal([1, 0, 0], math.pi / 4, UP)
    result = state.update(wall, [1.0, 1.0, 1.0], [1.0, 1.0, 1.0], False, lambda x: x)
    assert np.allclose(result, np.zeros(3))
    assert state.phase is CollisionPhase.CORNER