import math

import numpy as np
import pytest

from kinematic_feet.vectors import (
    angle_between,
    as_vec3,
    clamp_length_max,
    direction_and_length,
    normalize_or_zero,
    project_onto,
    reject_from,
    try_direction,
)


def test_as_vec3_rejects_wrong_shape():
    with pytest.raises(ValueError):
        as_vec3([1.0, 2.0])


def test_as_vec3_copies_values():
    source = np.array([1.0, 2.0, 3.0])
    result = as_vec3(source)
    result[0] = 9.0
    assert source[0] == 1.0


def test_normalize_or_zero_unit_and_zero():
    assert np.linalg.norm(normalize_or_zero([3.0, 4.0, 12.0])) == pytest.approx(1.0)
    assert np.array_equal(normalize_or_zero([0.0, 0.0, 0.0]), np.zeros(3))


def test_try_direction_invalid():
    assert try_direction([0.0, 0.0, 0.0]) is None
    assert try_direction([math.inf, 0.0, 0.0]) is None


def test_direction_and_length_recombines():
    vector = np.array([1.0, -2.0, 2.5])
    direction, length = direction_and_length(vector)
    assert np.allclose(direction * length, vector)


def test_project_and_reject_sum_to_original():
    v = np.array([1.0, 2.0, 3.0])
    axis = np.array([0.5, 1.0, -0.3])
    proj = project_onto(v, axis)
    rej = reject_from(v, axis)
    assert np.allclose(proj + rej, v)
    assert np.dot(rej, axis) == pytest.approx(0.0, abs=1e-12)


def test_reject_from_zero_axis_keeps_vector():
    v = np.array([1.0, 2.0, 3.0])
    assert np.allclose(reject_from(v, [0.0, 0.0, 0.0]), v)


def test_angle_between_perpendicular_and_parallel():
    assert angle_between([1, 0, 0], [0, 1, 0]) == pytest.approx(math.pi / 2)
    assert angle_between([2, 0, 0], [5, 0, 0]) == pytest.approx(0.0)


def test_clamp_length_max():
    clamped = clamp_length_max([3.0, 4.0, 0.0], 1.0)
    assert np.linalg.norm(clamped) == pytest.approx(1.0)
    short = np.array([0.1, 0.0, 0.0])
    assert np.allclose(clamp_length_max(short, 1.0), short)