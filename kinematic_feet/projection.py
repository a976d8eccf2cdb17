"""Surfaces, velocity projection and crease handling for collide-and-slide."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .grounding import is_walkable
from .vectors import (
    Vec3,
    as_vec3,
    normalize_or_zero,
    project_onto,
    reject_from,
    try_direction,
)

_F32_EPSILON = 1.1920929e-7


def _direction(vector) -> Vec3:
    direction = try_direction(vector)
    if direction is None:
        raise ValueError("vector has no valid direction")
    return direction


@dataclass(frozen=True, eq=False)
class Surface:
    """A hit surface and whether it can be walked on."""

    normal: Vec3
    is_walkable: bool

    @classmethod
    def from_normal(cls, normal, walkable_angle: float, up_direction) -> Surface:
        direction = _direction(normal)
        return cls(direction, is_walkable(direction, walkable_angle, up_direction))

    def obstruction_normal(self, current_ground_normal, up_direction) -> Vec3:
        """The normal to slide along; for walls while grounded it is kept horizontal."""
        if not self.is_walkable and current_ground_normal is not None:
            tangent = _direction(np.cross(as_vec3(current_ground_normal), self.normal))
            return _direction(np.cross(tangent, as_vec3(up_direction)))
        return self.normal

    def align_velocity(self, velocity, up_direction) -> Vec3:
        return align_with_surface(velocity, self.normal, up_direction)

    def project_velocity(self, velocity, current_ground_normal, up_direction) -> Vec3:
        obstruction = self.obstruction_normal(current_ground_normal, up_direction)
        return project_velocity(velocity, obstruction, self.is_walkable, current_ground_normal, up_direction)


class CollisionPhase(enum.Enum):
    INITIAL = "initial"
    PLANE = "plane"
    CREASE = "crease"
    CORNER = "corner"


@dataclass
class CollisionState:
    """Tracks successive collisions within one movement update."""

    phase: CollisionPhase = CollisionPhase.INITIAL
    previous_surface: Surface | None = None

    def reset(self) -> None:
        self.phase = CollisionPhase.INITIAL
        self.previous_surface = None

    def update(
        self,
        surface: Surface,
        velocity,
        previous_velocity,
        is_grounded: bool,
        project: Callable[[Vec3], Vec3],
    ) -> Vec3:
        """Return the velocity after this collision and advance the state."""
        v = as_vec3(velocity)
        if surface.is_walkable:
            return project(v)

        if self.phase is CollisionPhase.INITIAL:
            self.phase, self.previous_surface = CollisionPhase.PLANE, surface
            return project(v)

        if self.phase is CollisionPhase.PLANE:
            crease = detect_crease(surface, self.previous_surface, v, previous_velocity, is_grounded)
            if crease is None:
                self.previous_surface = surface
                return project(v)
            self.previous_surface = None
            if is_grounded:
                self.phase = CollisionPhase.CORNER
                return np.zeros(3)
            self.phase = CollisionPhase.CREASE
            return project_onto(v, crease)

        self.phase = CollisionPhase.CORNER
        self.previous_surface = None
        return np.zeros(3)


def project_velocity(velocity, obstruction_normal, is_walkable, current_ground_normal, up_direction) -> Vec3:
    """Redirect ``velocity`` after hitting a surface with ``obstruction_normal``."""
    v = as_vec3(velocity)
    n = as_vec3(obstruction_normal)
    up = as_vec3(up_direction)
    if current_ground_normal is not None:
        if is_walkable:
            return align_with_surface(v, n, up)
        ground_right = normalize_or_zero(np.cross(n, as_vec3(current_ground_normal)))
        ground_up = normalize_or_zero(np.cross(ground_right, n))
        return reject_from(align_with_surface(v, ground_up, up), n)
    if is_walkable:
        return align_with_surface(reject_from(v, up), n, up)
    return reject_from(v, n)


def detect_crease(current_surface, previous_surface, current_velocity, previous_velocity, is_grounded) -> Vec3 | None:
    """Return the crease direction if the two surfaces form a concave crease being entered."""
    if is_grounded and current_surface.is_walkable and previous_surface.is_walkable:
        return None
    if float(np.dot(current_surface.normal, previous_surface.normal)) > 1.0 - 1e-3:
        return None

    crease = _direction(np.cross(current_surface.normal, previous_surface.normal))
    current_on_plane = _direction(reject_from(current_surface.normal, crease))
    previous_on_plane = _direction(reject_from(previous_surface.normal, crease))
    entering = reject_from(previous_velocity, crease)

    dot_planes = float(np.dot(current_on_plane, previous_surface.normal))
    if (
        dot_planes > float(np.dot(entering, -current_on_plane)) + 1e-3
        or dot_planes > float(np.dot(entering, -previous_on_plane)) + 1e-3
    ):
        return None

    if float(np.dot(crease, as_vec3(current_velocity))) < 0.0:
        crease = -crease
    return crease


def align_with_surface(vector, normal, up) -> Vec3:
    """Turn ``vector`` into the ``normal`` plane along ``up``, keeping its length."""
    v = as_vec3(vector)
    right = np.cross(v, as_vec3(up))
    forward = np.cross(as_vec3(normal), right)
    return normalize_or_zero(forward) * float(np.linalg.norm(v))


def project_on_surface(vector, normal, up) -> Vec3:
    """Project ``vector`` onto the ``normal`` plane along the direction turned about ``up``."""
    v = as_vec3(vector)
    right = np.cross(v, as_vec3(up))
    forward = try_direction(np.cross(as_vec3(normal), right))
    if forward is None:
        return np.zeros(3)
    return forward * float(np.dot(v, forward))


def shift_to_surface(vector, normal, up) -> Vec3:
    """Move ``vector`` along ``up`` onto the ``normal`` plane, keeping the horizontal part."""
    v = as_vec3(vector)
    n = as_vec3(normal)
    u = as_vec3(up)
    vertical = project_onto(v, u)
    horizontal = v - vertical
    normal_dot_up = float(np.dot(n, u))
    if abs(normal_dot_up) < _F32_EPSILON:
        return vertical
    scale = -float(np.dot(n, horizontal)) / normal_dot_up
    return horizontal + scale * u