"""Ground state of a character and helpers for deciding what counts as ground."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Hashable

import numpy as np

from .sweep import QueryFilter, SpatialQuery, SweepHitData
from .vectors import Vec3, angle_between, as_vec3, try_direction


def walkable_angle(max_angle: float, is_grounded: bool) -> float:
    """The walkable angle, with a small margin while already grounded."""
    return max_angle + 0.01 if is_grounded else max_angle


def is_walkable(normal, walkable_angle: float, up) -> bool:
    """Whether a surface with ``normal`` is within ``walkable_angle`` of ``up``."""
    return angle_between(normal, up) <= walkable_angle


@dataclass(frozen=True, eq=False)
class Ground:
    """A surface a character stands on."""

    entity: Hashable
    normal: Vec3

    def __post_init__(self) -> None:
        direction = try_direction(self.normal)
        if direction is None:
            raise ValueError("ground normal must be a valid direction")
        object.__setattr__(self, "normal", direction)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ground):
            return NotImplemented
        return self.entity == other.entity and np.array_equal(self.normal, other.normal)

    def __hash__(self) -> int:
        return hash((self.entity, tuple(self.normal)))

    @classmethod
    def new_if_walkable(cls, entity, normal, up, walkable_angle: float) -> Ground | None:
        """Return a ground if ``normal`` is valid and walkable, otherwise None."""
        direction = try_direction(normal)
        if direction is None or not is_walkable(direction, walkable_angle, up):
            return None
        return cls(entity, direction)


@dataclass
class Grounding:
    """The current ground of a character, which can be detached from, e.g. when jumping."""

    inner_ground: Ground | None = None
    should_detach: bool = False

    def is_grounded(self) -> bool:
        return not self.should_detach and self.inner_ground is not None

    def ground(self) -> Ground | None:
        return None if self.should_detach else self.inner_ground

    def detach(self) -> Ground | None:
        """Detach from the ground if grounded; returns the ground that was left."""
        if not self.is_grounded():
            return None
        self.should_detach = True
        return self.inner_ground

    def normal(self) -> Vec3 | None:
        ground = self.ground()
        return None if ground is None else ground.normal

    def entity(self):
        ground = self.ground()
        return None if ground is None else ground.entity


@dataclass
class GroundingConfig:
    """Settings for grounding behaviour."""

    up_direction: Vec3 = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    max_angle: float = math.pi / 4.0
    max_distance: float = 0.2
    snap_to_surface: bool = True
    max_iterations: int = 2

    def __post_init__(self) -> None:
        direction = try_direction(self.up_direction)
        if direction is None:
            raise ValueError("up_direction must be a valid direction")
        self.up_direction = direction


@dataclass
class GroundingState:
    """The ground of the previous update and the one found during the current update."""

    previous: Ground | None = None
    pending: Ground | None = None


@dataclass(frozen=True)
class OnGroundEnter:
    """The character became grounded."""

    ground: Ground


@dataclass(frozen=True)
class OnGroundLeave:
    """The character stopped being grounded."""

    ground: Ground


def update_grounding(state: GroundingState) -> tuple[Grounding, OnGroundEnter | OnGroundLeave | None]:
    """Commit the pending ground; returns the new grounding and any enter/leave event."""
    event: OnGroundEnter | OnGroundLeave | None = None
    if state.previous is not None and state.pending is None:
        event = OnGroundLeave(state.previous)
    elif state.previous is None and state.pending is not None:
        event = OnGroundEnter(state.pending)
    state.previous = state.pending
    pending, state.pending = state.pending, None
    return Grounding(pending), event


def find_surface_normal(
    point,
    normal,
    up_direction,
    epsilon: float,
    query: SpatialQuery,
    query_filter: QueryFilter,
    filter_hits: Callable[[SweepHitData], bool],
) -> SweepHitData | None:
    """Look for a better surface normal near ``point`` with short downward rays."""
    p = as_vec3(point)
    up = as_vec3(up_direction)
    right = try_direction(np.cross(up, as_vec3(normal)))
    if right is None:
        return None
    forward = try_direction(np.cross(up, right))
    if forward is None:
        return None

    origins = (
        p + up * epsilon / 2.0,
        p + (up * 0.5 + forward) * epsilon,
        p + (up * 0.5 - forward) * epsilon,
    )

    best: SweepHitData | None = None
    for origin in origins:
        found = None
        for ray in query.ray_hits(origin, -up, epsilon, False, query_filter):
            sweep = SweepHitData(
                distance=ray.distance,
                point=p - up * ray.distance,
                normal=ray.normal,
                entity=ray.entity,
            )
            if filter_hits(sweep):
                found = sweep
                break
        if found is not None and (best is None or np.dot(found.normal, up) > np.dot(best.normal, up)):
            best = found
    return best