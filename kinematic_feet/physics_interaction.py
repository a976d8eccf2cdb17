"""Pushing dynamic bodies that a character runs into."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .collide_and_slide import MovementHitData
from .vectors import Vec3, as_vec3, direction_and_length, project_onto, try_direction


@dataclass(eq=False)
class BodyState:
    """The state of a rigid body that a character can push."""

    linear_velocity: Vec3 = field(default_factory=lambda: np.zeros(3))
    angular_velocity: Vec3 = field(default_factory=lambda: np.zeros(3))
    inverse_mass: float = 1.0
    inverse_inertia: np.ndarray = field(default_factory=lambda: np.eye(3))
    position: Vec3 = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    scale: Vec3 = field(default_factory=lambda: np.ones(3))
    center_of_mass: Vec3 = field(default_factory=lambda: np.zeros(3))
    is_dynamic: bool = True
    sleeping: bool = False

    def __post_init__(self) -> None:
        self.linear_velocity = as_vec3(self.linear_velocity)
        self.angular_velocity = as_vec3(self.angular_velocity)
        self.position = as_vec3(self.position)
        self.scale = as_vec3(self.scale)
        self.center_of_mass = as_vec3(self.center_of_mass)
        self.inverse_inertia = np.asarray(self.inverse_inertia, dtype=np.float64).reshape(3, 3)
        self.rotation = np.asarray(self.rotation, dtype=np.float64).reshape(3, 3)

    def world_center_of_mass(self) -> Vec3:
        return self.position + self.rotation @ (self.scale * self.center_of_mass)


def apply_acceleration_on_point(
    direction,
    max_acceleration: float,
    target_speed: float,
    point,
    linear_velocity,
    angular_velocity,
    inverse_mass: float,
    inverse_inertia,
    center_of_mass,
    delta: float,
) -> tuple[Vec3, Vec3]:
    """Accelerate a body at ``point`` without passing ``target_speed``; returns (linear, angular)."""
    d = as_vec3(direction)
    linear = as_vec3(linear_velocity)
    angular = as_vec3(angular_velocity)

    linear_speed = float(np.dot(linear, d))
    if linear_speed < target_speed:
        linear = linear + d * min(target_speed - linear_speed, max_acceleration * delta * inverse_mass)

    contact_offset = as_vec3(point) - as_vec3(center_of_mass)
    torque = np.cross(contact_offset, d * max_acceleration * delta)
    torque_axis = try_direction(torque)
    if torque_axis is None:
        return linear, angular

    angular_speed = float(np.dot(angular, torque_axis))
    if angular_speed < target_speed:
        inertia = np.asarray(inverse_inertia, dtype=np.float64).reshape(3, 3)
        angular_accel = min(target_speed - angular_speed, float(np.linalg.norm(inertia @ torque)))
        angular = angular + torque_axis * angular_accel
    return linear, angular


def apply_impulse_on_point(
    impulse,
    point,
    linear_velocity,
    angular_velocity,
    inverse_mass: float,
    inverse_inertia,
    center_of_mass,
) -> tuple[Vec3, Vec3]:
    """Apply ``impulse`` at ``point``; returns the new (linear, angular) velocities."""
    j = as_vec3(impulse)
    linear = as_vec3(linear_velocity) + inverse_mass * j
    torque = np.cross(as_vec3(point) - as_vec3(center_of_mass), j)
    inertia = np.asarray(inverse_inertia, dtype=np.float64).reshape(3, 3)
    angular = as_vec3(angular_velocity) + inertia @ torque
    return linear, angular


def push_on_hit(
    hit_velocity,
    hit: MovementHitData,
    character_mass: float,
    body: BodyState,
    delta: float,
) -> Vec3:
    """Push ``body`` after a character hit it; returns the change to the character's velocity."""
    if not body.is_dynamic:
        return np.zeros(3)

    impulse = project_onto(hit_velocity, hit.surface.normal)
    split = direction_and_length(impulse)
    if split is None:
        return np.zeros(3)
    direction, accel = split

    body.linear_velocity, body.angular_velocity = apply_acceleration_on_point(
        direction,
        accel * character_mass,
        accel,
        hit.point,
        body.linear_velocity,
        body.angular_velocity,
        body.inverse_mass,
        body.inverse_inertia,
        body.world_center_of_mass(),
        delta,
    )
    body.sleeping = False
    return as_vec3(hit.direction) * hit.distance