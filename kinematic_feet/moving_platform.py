"""Velocity inherited from the platform a character stands on."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .vectors import Vec3, as_vec3


def inherited_velocity_at_point(translation, linear_velocity, angular_velocity, point) -> Vec3:
    """Velocity of a moving, rotating body at ``point``."""
    velocity = as_vec3(linear_velocity)
    angular = as_vec3(angular_velocity)
    if float(np.dot(angular, angular)) > 0.0:
        radius_vector = as_vec3(point) - as_vec3(translation)
        velocity = velocity + np.cross(angular, radius_vector)
    return velocity


@dataclass
class InheritedVelocity:
    """The velocity of the ground a character is standing on."""

    value: Vec3 = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.value = as_vec3(self.value)

    @classmethod
    def at_point(
        cls,
        translation,
        linear_velocity,
        angular_velocity,
        point,
        relative_velocity,
        delta: float,
    ) -> InheritedVelocity:
        """Platform velocity sampled halfway through the time step."""
        initial = inherited_velocity_at_point(translation, linear_velocity, angular_velocity, point)
        midpoint = as_vec3(point) + (as_vec3(relative_velocity) + initial) * delta / 2.0
        return cls(inherited_velocity_at_point(translation, linear_velocity, angular_velocity, midpoint))


def move_with_platform(position, inherited_velocity: InheritedVelocity, delta: float) -> Vec3:
    """Return the position carried along by the platform for one step."""
    return as_vec3(position) + inherited_velocity.value * delta


def apply_inherited_velocity_on_ground_leave(velocity, inherited_velocity: InheritedVelocity) -> Vec3:
    """Add the platform velocity to ``velocity`` and clear it, as when leaving the ground."""
    result = as_vec3(velocity) + inherited_velocity.value
    inherited_velocity.value = np.zeros(3)
    return result