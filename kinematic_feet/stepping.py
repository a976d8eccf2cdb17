"""Stepping up over small obstacles in the way of a moving character."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

from .grounding import find_surface_normal
from .sweep import QueryFilter, SpatialQuery, SweepHitData, collision_sweep
from .vectors import as_vec3

STEP_EPSILON = 1e-4


@dataclass(frozen=True)
class StepOutput:
    """A found step: how far to move forward and up, and the surface stepped onto."""

    horizontal: float
    vertical: float
    hit: SweepHitData


class SteppingBehaviour(enum.Enum):
    """When a character should try to step up."""

    NEVER = "never"
    GROUNDED = "grounded"
    ALWAYS = "always"


@dataclass
class SteppingConfig:
    """Stepping limits of a character."""

    max_vertical: float = 0.25
    max_horizontal: float = 0.4
    max_substeps: int = 8
    behaviour: SteppingBehaviour = SteppingBehaviour.GROUNDED

    def is_valid(self) -> bool:
        return self.max_vertical > 0.0 and self.max_horizontal >= 0.0


def perform_step(
    config: SteppingConfig,
    shape,
    origin,
    rotation,
    direction,
    forward_motion: float,
    up,
    skin_width: float,
    query: SpatialQuery,
    query_filter: QueryFilter,
    filter_hits: Callable[[SweepHitData], bool],
    is_walkable: Callable[[SweepHitData], bool],
) -> StepOutput | None:
    """Try to step up and forward over an obstacle; None if no step is possible."""
    if not config.is_valid() or forward_motion <= 0.0:
        return None

    origin = as_vec3(origin)
    direction = as_vec3(direction)
    up = as_vec3(up)

    step_up = _step_up(
        shape, origin, rotation, up, skin_width, config.max_vertical, query, query_filter, filter_hits
    )
    if step_up is None:
        return None

    return _step_forward(
        config,
        shape,
        origin,
        rotation,
        direction,
        forward_motion,
        up,
        step_up,
        skin_width,
        query,
        query_filter,
        filter_hits,
        is_walkable,
    )


def _step_up(shape, origin, rotation, up, skin_width, max_step_up, query, query_filter, filter_hits):
    step_up = max_step_up
    hit = collision_sweep(
        shape, origin, rotation, up, max_step_up, skin_width, query, query_filter, False, filter_hits
    )
    if hit is not None:
        step_up = max(hit.distance, 0.0)
    if step_up < STEP_EPSILON:
        return None
    return step_up


def _step_forward(
    config,
    shape,
    origin,
    rotation,
    direction,
    forward_motion,
    up,
    step_up,
    skin_width,
    query,
    query_filter,
    filter_hits,
    validate_step,
):
    min_valid_step: StepOutput | None = None
    min_step_forward = forward_motion
    step_forward = forward_motion
    step_size = config.max_horizontal / max(config.max_substeps, 1)
    step_up_position = origin + up * step_up

    for i in range(config.max_substeps + 1):
        hit_wall = False
        wall = collision_sweep(
            shape,
            step_up_position,
            rotation,
            direction,
            step_forward,
            skin_width,
            query,
            query_filter,
            False,
            filter_hits,
        )
        if wall is not None:
            if wall.distance <= 0.0:
                break
            step_forward = wall.distance
            hit_wall = True

        step_forward_position = step_up_position + direction * step_forward

        valid_step = None
        floor = collision_sweep(
            shape,
            step_forward_position,
            rotation,
            -up,
            step_up + skin_width,
            skin_width,
            query,
            query_filter,
            False,
            filter_hits,
        )
        if floor is not None and floor.distance > 0.0 and step_up - floor.distance > skin_width:
            better = find_surface_normal(
                floor.point, floor.normal, up, 0.01, query, query_filter, filter_hits
            )
            if better is not None:
                floor.normal = better.normal

            if validate_step(floor):
                valid_step = StepOutput(step_forward, step_up - floor.distance, floor)
                if i == 0:
                    return valid_step

        if valid_step is None:
            min_step_forward = step_forward
        else:
            last, min_valid_step = min_valid_step, valid_step
            if last is not None and last.horizontal - step_forward < STEP_EPSILON:
                break

        if hit_wall:
            break

        if min_valid_step is None:
            step_forward += step_size
        else:
            step_forward = (min_step_forward + min_valid_step.horizontal) / 2.0

    return min_valid_step