import numpy as np
import pytest

from kinematic_feet.character import (
    Character,
    CollisionEnded,
    CollisionStarted,
    OnHit,
    OnStep,
)
from kinematic_feet.grounding import Ground, Grounding
from kinematic_feet.sweep import SpatialQuery


def wall_world():
    query = SpatialQuery()
    query.add_half_space("wall", (-1.0, 0.0, 0.0), (1.0, 0.0, 0.0))
    return query


def test_sensor_moves_straight_through():
    query = wall_world()
    character = Character("player", 0.5, velocity=(10.0, 0.0, 0.0), is_sensor=True, grounding=None)
    events = character.move(query, 0.5)
    assert events == []
    assert np.allclose(character.position, [5.0, 0.0, 0.0])


def test_free_movement_without_obstacles():
    character = Character("player", 0.5, velocity=(1.0, 2.0, 3.0), grounding=None, stepping=None)
    events = character.move(SpatialQuery(), 0.5)
    assert events == []
    assert np.allclose(character.position, [0.5, 1.0, 1.5])
    assert np.allclose(character.movement_delta, [0.5, 1.0, 1.5])
    assert np.allclose(character.velocity, [1.0, 2.0, 3.0])


def test_hitting_a_wall_stops_and_reports():
    character = Character("player", 0.5, velocity=(10.0, 0.0, 0.0), grounding=None, stepping=None)
    events = character.move(wall_world(), 1.0)
    assert [type(e) for e in events] == [OnHit, CollisionStarted, CollisionEnded]
    assert events[0].hit.entity == "wall"
    assert np.allclose(events[0].velocity, [10.0, 0.0, 0.0])
    assert events[1] == CollisionStarted("player", "wall")
    assert 0.0 < character.position[0] < 0.5
    assert np.allclose(character.velocity, 0.0)


def test_collision_events_can_be_disabled():
    character = Character(
        "player",
        0.5,
        velocity=(10.0, 0.0, 0.0),
        grounding=None,
        stepping=None,
        collision_events_enabled=False,
    )
    events = character.move(wall_world(), 1.0)
    assert [type(e) for e in events] == [OnHit]


def test_sensor_entities_are_ignored():
    character = Character("player", 0.5, velocity=(10.0, 0.0, 0.0), grounding=None, stepping=None)
    events = character.move(wall_world(), 1.0, is_sensor_entity=lambda entity: entity == "wall")
    assert events == []
    assert np.allclose(character.position, [10.0, 0.0, 0.0])


def test_landing_sets_pending_ground():
    query = SpatialQuery()
    query.add_half_space("floor", (0.0, 1.0, 0.0))
    character = Character("player", 0.5, position=(0.0, 2.0, 0.0), velocity=(0.0, -10.0, 0.0), stepping=None)
    events = character.move(query, 1.0)
    assert character.grounding_state.pending is not None
    assert character.grounding_state.pending.entity == "floor"
    hits = [e for e in events if isinstance(e, OnHit)]
    assert hits and hits[0].hit.surface.is_walkable
    assert character.position[1] > 0.5
    assert np.allclose(character.velocity, 0.0)


def test_grounded_character_cannot_step_over_infinite_wall():
    query = wall_world()
    query.add_half_space("floor", (0.0, 1.0, 0.0))
    character = Character(
        "player",
        0.5,
        position=(0.0, 0.6, 0.0),
        velocity=(10.0, 0.0, 0.0),
        grounding=Grounding(Ground("floor", (0.0, 1.0, 0.0))),
    )
    events = character.move(query, 1.0)
    assert not any(isinstance(e, OnStep) for e in events)
    assert any(isinstance(e, OnHit) and e.hit.entity == "wall" for e in events)
    assert character.position[0] < 0.5
    assert character.position[1] == pytest.approx(0.6)
    assert np.allclose(character.velocity, 0.0, atol=1e-9)