"""Pushing a character out of the colliders it overlaps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable

import numpy as np

from .grounding import Ground, Grounding, GroundingConfig, OnGroundEnter
from .projection import Surface, project_velocity
from .vectors import Vec3, as_vec3, reject_from, try_direction


@dataclass(frozen=True, eq=False)
class ContactManifold:
    """Contacts sharing one normal, pointing from the first collider to the second."""

    normal: Vec3
    penetrations: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "normal", as_vec3(self.normal))
        object.__setattr__(self, "penetrations", tuple(float(p) for p in self.penetrations))


@dataclass(eq=False)
class DepenetrationResult:
    """The character's state after depenetration and the ground events raised."""

    position: Vec3
    velocity: Vec3
    grounding: Grounding | None
    events: list[OnGroundEnter] = field(default_factory=list)


def _unit(vector) -> Vec3:
    direction = try_direction(vector)
    if direction is None:
        raise ValueError("contact normal has no valid direction")
    return direction


def _insert_overlap(overlaps: list[tuple[Vec3, float]], direction: Vec3, depth: float) -> None:
    """Keep ``overlaps`` ordered by depth, deepest first, merging equal overlaps."""
    index = next((i for i, (_, d) in enumerate(overlaps) if d <= depth), len(overlaps))
    if index < len(overlaps) and overlaps[index][1] == depth:
        if float(np.dot(overlaps[index][0], direction)) > 1.0 - 1e-4:
            overlaps[index] = (direction, depth)
            return
    overlaps.insert(index, (direction, depth))


def depenetrate(
    position,
    velocity,
    character_is_first: bool,
    other: Hashable,
    manifolds: Iterable[ContactManifold],
    grounding: Grounding | None = None,
    grounding_config: GroundingConfig | None = None,
) -> DepenetrationResult:
    """Resolve the overlap of a character with ``other`` given their contact manifolds.

    Grounding is only taken into account when both ``grounding`` and
    ``grounding_config`` are given.
    """
    pos = as_vec3(position)
    vel = as_vec3(velocity)
    current = grounding if grounding_config is not None else None
    events: list[OnGroundEnter] = []
    overlaps: list[tuple[Vec3, float]] = []

    for manifold in manifolds:
        hit_normal = -manifold.normal if character_is_first else manifold.normal

        if current is not None:
            up = grounding_config.up_direction
            surface = Surface.from_normal(hit_normal, grounding_config.max_angle, up)
            ground_normal = current.normal()
            obstruction = surface.obstruction_normal(ground_normal, up)
        else:
            surface = Surface(_unit(hit_normal), False)
            ground_normal = None
            obstruction = surface.normal

        for penetration in manifold.penetrations:
            depth = penetration * float(np.dot(hit_normal, obstruction))
            _insert_overlap(overlaps, obstruction, depth)

        if float(np.dot(vel, hit_normal)) > 0.0:
            continue

        if current is not None:
            vel = project_velocity(
                vel, obstruction, surface.is_walkable, ground_normal, grounding_config.up_direction
            )
        else:
            vel = reject_from(vel, obstruction)

        if surface.is_walkable and current is not None:
            ground = Ground(other, hit_normal)
            if not current.is_grounded():
                events.append(OnGroundEnter(ground))
            current = Grounding(ground)

    if overlaps:
        directions = np.array([direction for direction, _ in overlaps])
        depths = np.array([depth for _, depth in overlaps])
        for i, direction in enumerate(directions):
            depth = depths[i]
            if depth <= 0.0:
                continue
            pos = pos + direction * depth
            depths[i:] -= np.maximum(0.0, (directions[i:] @ direction) * depth)

    final_grounding = current if grounding_config is not None else grounding
    return DepenetrationResult(pos, vel, final_grounding, events)