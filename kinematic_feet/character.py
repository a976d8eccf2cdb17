"""A kinematic character moved with collide-and-slide, stepping and hit events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Hashable, Union

import numpy as np

from .collide_and_slide import (
    CollideAndSlideConfig,
    CollisionResponse,
    MovementHitData,
    MovementState,
    collide_and_slide,
)
from .grounding import Ground, Grounding, GroundingConfig, GroundingState, is_walkable, walkable_angle
from .projection import Surface, align_with_surface
from .stepping import SteppingBehaviour, SteppingConfig, perform_step
from .sweep import QueryFilter, SpatialQuery, SweepHitData
from .vectors import Vec3, as_vec3, direction_and_length, reject_from, try_direction


@dataclass(frozen=True, eq=False)
class OnHit:
    """The character hit an obstacle while moving."""

    velocity: Vec3
    hit: MovementHitData


@dataclass(frozen=True, eq=False)
class OnStep:
    """The character stepped over an obstacle."""

    velocity: Vec3
    origin: Vec3
    offset: Vec3
    hit: SweepHitData


@dataclass(frozen=True)
class CollisionStarted:
    """A collision between the character and another entity began."""

    entity: Hashable
    other: Hashable


@dataclass(frozen=True)
class CollisionEnded:
    """A collision between the character and another entity ended."""

    entity: Hashable
    other: Hashable


Event = Union[OnHit, OnStep, CollisionStarted, CollisionEnded]


def _unit(vector) -> Vec3:
    direction = try_direction(vector)
    if direction is None:
        raise ValueError("vector has no valid direction")
    return direction


@dataclass(eq=False)
class Character:
    """A kinematic body with optional grounding and stepping.

    Setting ``grounding`` or ``stepping`` to None disables that behaviour.
    """

    entity: Hashable
    shape: object
    position: Vec3 = field(default_factory=lambda: np.zeros(3))
    velocity: Vec3 = field(default_factory=lambda: np.zeros(3))
    rotation: object = None
    query_filter: QueryFilter = field(default_factory=QueryFilter)
    config: CollideAndSlideConfig | None = None
    grounding: Grounding | None = field(default_factory=Grounding)
    grounding_config: GroundingConfig = field(default_factory=GroundingConfig)
    grounding_state: GroundingState = field(default_factory=GroundingState)
    stepping: SteppingConfig | None = field(default_factory=SteppingConfig)
    collision_events_enabled: bool = True
    is_sensor: bool = False
    movement_delta: Vec3 = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.position = as_vec3(self.position)
        self.velocity = as_vec3(self.velocity)
        self.movement_delta = as_vec3(self.movement_delta)

    def _wants_step(self, grounding: Grounding) -> bool:
        behaviour = self.stepping.behaviour
        if behaviour is SteppingBehaviour.NEVER:
            return False
        if behaviour is SteppingBehaviour.GROUNDED:
            return grounding.is_grounded()
        return True

    def move(
        self,
        query: SpatialQuery,
        delta: float,
        default_config: CollideAndSlideConfig | None = None,
        is_sensor_entity: Callable[[Hashable], bool] | None = None,
        is_dynamic_entity: Callable[[Hashable], bool] | None = None,
    ) -> list[Event]:
        """Move the character by its velocity over ``delta`` seconds; returns the events raised."""
        events: list[Event] = []

        # Sensors pass through everything.
        if self.is_sensor:
            self.position = self.position + self.velocity * delta
            return events

        config = self.config or default_config or CollideAndSlideConfig()
        sensor = is_sensor_entity or (lambda entity: False)
        dynamic = is_dynamic_entity or (lambda entity: False)
        grounding = self.grounding
        grounding_config = self.grounding_config
        up = grounding_config.up_direction

        def filter_hits(hit: SweepHitData) -> bool:
            return not sensor(hit.entity)

        def get_surface(hit: SweepHitData) -> Surface | None:
            if not filter_hits(hit):
                return None
            if grounding is None:
                return Surface(_unit(hit.normal), False)
            return Surface.from_normal(
                hit.normal,
                walkable_angle(grounding_config.max_angle, grounding.is_grounded()),
                up,
            )

        def can_step_on(hit: SweepHitData) -> bool:
            if not is_walkable(hit.normal, grounding_config.max_angle - 0.01, up):
                return False
            # Stepping onto dynamic bodies is unreliable.
            return not dynamic(hit.entity)

        def try_step(movement: MovementState) -> bool:
            remaining = reject_from(movement.velocity * movement.remaining_time, up)
            split = direction_and_length(remaining)
            if split is None:
                return False
            horizontal_direction, horizontal_motion = split
            step = perform_step(
                self.stepping,
                self.shape,
                movement.position(),
                self.rotation,
                horizontal_direction,
                horizontal_motion,
                up,
                config.skin_width,
                query,
                self.query_filter,
                filter_hits,
                can_step_on,
            )
            if step is None:
                return False

            offset = up * step.vertical + horizontal_direction * step.horizontal
            duration = step.horizontal * delta
            events.append(
                OnStep(
                    velocity=movement.velocity.copy(),
                    origin=movement.position(),
                    offset=offset,
                    hit=step.hit,
                )
            )
            movement.offset = movement.offset + offset
            movement.velocity = align_with_surface(movement.velocity, step.hit.normal, up)
            movement.ground = Ground(step.hit.entity, step.hit.normal)
            movement.remaining_time = max(movement.remaining_time - duration, 0.0)
            return True

        def on_hit(movement: MovementState, hit: MovementHitData) -> CollisionResponse:
            if (
                not hit.surface.is_walkable
                and self.stepping is not None
                and grounding is not None
                and self._wants_step(grounding)
                and try_step(movement)
            ):
                return CollisionResponse.SKIP

            events.append(OnHit(velocity=movement.velocity.copy(), hit=hit))
            if self.collision_events_enabled:
                # The slide ends the contact straight away.
                events.append(CollisionStarted(self.entity, hit.entity))
                events.append(CollisionEnded(self.entity, hit.entity))
            return CollisionResponse.SLIDE

        def project(velocity: Vec3, surface: Surface) -> Vec3:
            if grounding is None:
                return reject_from(velocity, surface.normal)
            return surface.project_velocity(velocity, grounding.normal(), up)

        movement = MovementState(self.velocity, self.position, delta)
        collide_and_slide(
            movement,
            self.shape,
            self.rotation,
            grounding is not None and grounding.is_grounded(),
            config,
            query,
            self.query_filter,
            get_surface,
            on_hit,
            project,
        )

        self.movement_delta = movement.offset.copy()
        self.position = self.position + movement.offset
        self.velocity = movement.velocity.copy()
        if grounding is not None:
            self.grounding_state.pending = movement.ground
        return events