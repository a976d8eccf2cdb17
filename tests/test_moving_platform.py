import numpy as np
import pytest

from kinematic_feet.moving_platform import (
    InheritedVelocity,
    apply_inherited_velocity_on_ground_leave,
    inherited_velocity_at_point,
    move_with_platform,
)


def test_no_rotation_gives_linear_velocity():
    result = inherited_velocity_at_point([0.0, 0.0, 0.0], [1.0, 2.0, 3.0], [0.0, 0.0, 0.0], [5.0, 0.0, 0.0])
    assert np.allclose(result, [1.0, 2.0, 3.0])


def test_rotation_about_up_at_side_point():
    result = inherited_velocity_at_point([0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 2.0, 0.0], [1.0, 0.0, 0.0])
    assert np.allclose(result, [0.0, 0.0, -2.0])


def test_tangential_velocity_is_perpendicular_to_radius():
    center = np.array([1.0, 0.5, -2.0])
    point = np.array([3.0, 1.0, 4.0])
    result = inherited_velocity_at_point(center, np.zeros(3), [0.3, 1.2, -0.7], point)
    assert float(np.dot(result, point - center)) == pytest.approx(0.0, abs=1e-9)


def test_at_point_with_zero_delta_matches_direct_sample():
    args = ([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [2.0, 0.0, 0.0])
    sampled = InheritedVelocity.at_point(*args, [3.0, 0.0, 0.0], 0.0)
    assert np.allclose(sampled.value, inherited_velocity_at_point(*args))


def test_at_point_without_rotation_is_linear():
    sampled = InheritedVelocity.at_point([0.0, 0.0, 0.0], [0.5, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [4.0, 0.0, 0.0], 0.1)
    assert np.allclose(sampled.value, [0.5, 0.0, 0.0])


def test_move_with_platform_round_trip():
    inherited = InheritedVelocity([1.0, -2.0, 0.5])
    start = np.array([3.0, 4.0, 5.0])
    moved = move_with_platform(start, inherited, 0.25)
    back = move_with_platform(moved, InheritedVelocity(-inherited.value), 0.25)
    assert np.allclose(back, start)
    assert np.allclose(move_with_platform(start, inherited, 0.0), start)


def test_leaving_ground_adds_and_clears_inherited_velocity():
    inherited = InheritedVelocity([1.0, 0.0, 2.0])
    result = apply_inherited_velocity_on_ground_leave([0.0, 3.0, 0.0], inherited)
    assert np.allclose(result, [1.0, 3.0, 2.0])
    assert not np.any(inherited.value)


def test_inherited_velocity_rejects_bad_shape():
    with pytest.raises(ValueError):
        InheritedVelocity([1.0, 2.0])