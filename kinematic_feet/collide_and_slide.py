"""Collide-and-slide movement of a swept shape through a spatial query world."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Hashable

import numpy as np

from .grounding import Ground
from .projection import CollisionState, Surface
from .sweep import QueryFilter, SpatialQuery, SweepHitData, collision_sweep
from .vectors import Vec3, as_vec3, direction_and_length


@dataclass(frozen=True, eq=False)
class MovementHitData:
    """Everything known about one obstruction met during collide-and-slide."""

    origin: Vec3
    direction: Vec3
    max_distance: float
    distance: float
    surface: Surface
    entity: Hashable
    point: Vec3
    normal: Vec3


class CollisionResponse(enum.Enum):
    """What collide-and-slide should do after a hit."""

    SLIDE = "slide"
    SKIP = "skip"
    STOP = "stop"


@dataclass(eq=False)
class MovementState:
    """Velocity and accumulated offset of a body during one movement update."""

    velocity: Vec3
    origin: Vec3
    remaining_time: float
    offset: Vec3 = field(default_factory=lambda: np.zeros(3))
    ground: Ground | None = None

    def __post_init__(self) -> None:
        self.velocity = as_vec3(self.velocity)
        self.origin = as_vec3(self.origin)
        self.offset = as_vec3(self.offset)
        self.remaining_time = float(self.remaining_time)

    def position(self) -> Vec3:
        """The current position: origin plus the offset moved so far."""
        return self.origin + self.offset


@dataclass(frozen=True)
class CollideAndSlideConfig:
    """Settings for :func:`collide_and_slide`."""

    max_iterations: int = 4
    skin_width: float = 0.05
    max_penetration_retraction: float = 0.0


def collide_and_slide(
    state: MovementState,
    shape,
    rotation,
    is_grounded: bool,
    config: CollideAndSlideConfig,
    query: SpatialQuery,
    query_filter: QueryFilter,
    get_surface: Callable[[SweepHitData], Surface | None],
    on_hit: Callable[[MovementState, MovementHitData], CollisionResponse],
    project_velocity: Callable[[Vec3, Surface], Vec3],
) -> None:
    """Move ``state`` along its velocity, sliding along the surfaces it hits.

    ``get_surface`` decides which hits count (None ignores the hit), ``on_hit``
    decides how to respond, and ``project_velocity`` redirects the velocity.
    """
    collision_state = CollisionState()
    previous_velocity = state.velocity.copy()

    for _ in range(config.max_iterations):
        split = direction_and_length(state.velocity * state.remaining_time)
        if split is None:
            break
        direction, max_distance = split
        origin = state.position()

        surface: Surface | None = None

        def accept(hit: SweepHitData) -> bool:
            nonlocal surface
            surface = get_surface(hit)
            return surface is not None

        hit = collision_sweep(
            shape,
            origin,
            rotation,
            direction,
            max_distance,
            config.skin_width,
            query,
            query_filter,
            True,
            accept,
        )
        if hit is None:
            state.offset = state.offset + direction * max_distance
            break

        hit_surface: Surface = surface
        distance = max(hit.distance, -config.max_penetration_retraction)

        state.remaining_time *= 1.0 - distance / max_distance
        state.offset = state.offset + direction * distance

        if hit_surface.is_walkable:
            state.ground = Ground(hit.entity, hit_surface.normal)

        impact = MovementHitData(
            origin=origin,
            direction=direction,
            max_distance=max_distance,
            distance=hit.distance,
            surface=hit_surface,
            entity=hit.entity,
            point=hit.point,
            normal=hit.normal,
        )

        response = on_hit(state, impact)
        if response is CollisionResponse.SKIP:
            continue
        if response is CollisionResponse.STOP:
            break

        previous, previous_velocity = previous_velocity, state.velocity.copy()
        state.velocity = collision_state.update(
            hit_surface,
            state.velocity,
            previous,
            is_grounded,
            lambda velocity: project_velocity(velocity, hit_surface),
        )