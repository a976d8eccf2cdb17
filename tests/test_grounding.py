import math

import numpy as np
import pytest

from kinematic_feet.grounding import (
    Ground,
    Grounding,
    GroundingConfig,
    GroundingState,
    OnGroundEnter,
    OnGroundLeave,
    find_surface_normal,
    is_walkable,
    update_grounding,
    walkable_angle,
)
from kinematic_feet.sweep import QueryFilter, SpatialQuery

UP = np.array([0.0, 1.0, 0.0])


def test_walkable_angle_margin():
    assert walkable_angle(0.5, False) == 0.5
    assert walkable_angle(0.5, True) > 0.5


def test_is_walkable():
    assert is_walkable(UP, math.pi / 4, UP)
    assert not is_walkable([1.0, 0.0, 0.0], math.pi / 4, UP)


def test_ground_normalizes_and_rejects_zero():
    ground = Ground(1, [0.0, 3.0, 0.0])
    assert np.allclose(ground.normal, UP)
    with pytest.raises(ValueError):
        Ground(1, [0.0, 0.0, 0.0])


def test_new_if_walkable():
    assert Ground.new_if_walkable(1, [1, 0, 0], UP, math.pi / 4) is None
    assert Ground.new_if_walkable(1, [0, 0, 0], UP, math.pi / 4) is None
    assert Ground.new_if_walkable(1, UP, UP, math.pi / 4) == Ground(1, UP)


def test_detach():
    grounding = Grounding(Ground(7, UP))
    assert grounding.is_grounded()
    assert grounding.entity() == 7
    left = grounding.detach()
    assert left == Ground(7, UP)
    assert not grounding.is_grounded()
    assert grounding.ground() is None
    assert grounding.normal() is None
    assert grounding.inner_ground == Ground(7, UP)
    assert grounding.detach() is None


def test_update_grounding_events():
    ground = Ground(3, UP)
    state = GroundingState(pending=ground)
    grounding, event = update_grounding(state)
    assert event == OnGroundEnter(ground)
    assert grounding.is_grounded()
    assert state.pending is None and state.previous == ground

    grounding, event = update_grounding(state)
    assert event == OnGroundLeave(ground)
    assert not grounding.is_grounded()


def test_update_grounding_stays_grounded_without_event():
    ground = Ground(3, UP)
    state = GroundingState(previous=ground, pending=ground)
    grounding, event = update_grounding(state)
    assert event is None
    assert grounding.ground() == ground


def test_grounding_config_defaults():
    config = GroundingConfig()
    assert config.max_angle == pytest.approx(math.pi / 4)
    assert config.max_iterations == 2
    assert config.snap_to_surface


def test_find_surface_normal_on_floor():
    query = SpatialQuery()
    query.add_half_space("floor", UP)
    tilted = np.array([0.3, 0.7, 0.0])
    hit = find_surface_normal([0, 0, 0], tilted, UP, 0.01, query, QueryFilter(), lambda h: True)
    assert np.allclose(hit.normal, UP)
    assert hit.entity == "floor"


def test_find_surface_normal_parallel_normal_returns_none():
    query = SpatialQuery()
    query.add_half_space("floor", UP)
    assert find_surface_normal([0, 0, 0], UP, UP, 0.01, query, QueryFilter(), lambda h: True) is None