"""Detecting the ground below a character with a short downward collide-and-slide."""

from __future__ import annotations

import dataclasses
from typing import Callable

import numpy as np

from .collide_and_slide import (
    CollideAndSlideConfig,
    CollisionResponse,
    MovementHitData,
    MovementState,
    collide_and_slide,
)
from .grounding import (
    Grounding,
    GroundingConfig,
    GroundingState,
    find_surface_normal,
    walkable_angle,
)
from .projection import Surface
from .sweep import QueryFilter, SpatialQuery, SweepHitData
from .vectors import Vec3, as_vec3, reject_from


def detect_ground(
    position,
    rotation,
    shape,
    grounding: Grounding,
    grounding_config: GroundingConfig,
    state: GroundingState,
    config: CollideAndSlideConfig,
    query: SpatialQuery,
    query_filter: QueryFilter,
    filter_hits: Callable[[SweepHitData], bool] | None = None,
) -> Vec3:
    """Find the ground below ``position`` and store it in ``state.pending``.

    Returns the new position, snapped onto the ground when the config asks for it.
    Characters that are neither grounded nor have a pending ground are left alone.
    """
    position = as_vec3(position)
    if not grounding.is_grounded() and state.pending is None:
        return position

    accept = filter_hits or (lambda hit: True)
    up = grounding_config.up_direction
    grounded = grounding.is_grounded()

    # Sliding rather than a single downward cast keeps contact with the current
    # ground when a sloped obstruction would otherwise be hit first.
    movement = MovementState(-up * grounding_config.max_distance, position, 1.0)

    def get_surface(hit: SweepHitData) -> Surface | None:
        if not accept(hit):
            return None
        normal = hit.normal
        # Shape casts give separation normals; rays near the hit point find the
        # actual surface normal, which matters on edges.
        ray_hit = find_surface_normal(hit.point, hit.normal, up, 0.01, query, query_filter, accept)
        if ray_hit is not None and float(np.dot(ray_hit.normal, up)) > float(np.dot(hit.normal, up)):
            normal = ray_hit.normal
        return Surface.from_normal(normal, walkable_angle(grounding_config.max_angle, grounded), up)

    def on_hit(state_: MovementState, hit: MovementHitData) -> CollisionResponse:
        if not hit.surface.is_walkable:
            return CollisionResponse.SLIDE
        if hit.distance < -config.max_penetration_retraction:
            state_.offset = state_.offset - up * hit.distance
        return CollisionResponse.STOP

    collide_and_slide(
        movement,
        shape,
        rotation,
        grounded,
        dataclasses.replace(config, max_iterations=grounding_config.max_iterations),
        query,
        query_filter,
        get_surface,
        on_hit,
        lambda velocity, surface: reject_from(velocity, surface.normal),
    )

    state.pending = movement.ground

    if grounding_config.snap_to_surface and movement.ground is not None:
        return position + movement.offset
    return position