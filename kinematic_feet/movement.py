"""Character movement: input, acceleration, braking, gravity, friction, drag, jumping and bouncing."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

import numpy as np

from .grounding import Grounding, GroundingConfig
from .projection import Surface, align_with_surface
from .vectors import (
    Vec3,
    as_vec3,
    clamp_length_max,
    direction_and_length,
    project_onto,
    reject_from,
    try_direction,
)


@dataclass
class CharacterMovement:
    """How fast a character moves and how quickly it gets there."""

    target_speed: float = 8.0
    acceleration: float = 100.0


@dataclass
class CharacterGravity:
    """Gravity while not grounded; None means the world's default gravity is used."""

    value: Vec3 | None = None

    def __post_init__(self) -> None:
        if self.value is not None:
            self.value = as_vec3(self.value)


CharacterGravity.ZERO = CharacterGravity(np.zeros(3))
CharacterGravity.EARTH = CharacterGravity(np.array([0.0, -9.81, 0.0]))


@dataclass
class GroundFriction:
    """Friction applied while grounded, scaled by the ground's friction scale."""

    value: float = 60.0


GroundFriction.ZERO = GroundFriction(0.0)


@dataclass
class CharacterDrag:
    """Drag applied to the velocity at all times."""

    value: float = 0.01


CharacterDrag.ZERO = CharacterDrag(0.0)


class BounceBehaviour(enum.Enum):
    """Which surfaces a character bounces off."""

    ALWAYS = "always"
    GROUND = "ground"
    OBSTRUCTION = "obstruction"
    NEVER = "never"


@dataclass
class CharacterBounce:
    """Bounciness of a character when it hits something."""

    restitution: float = 0.9
    behaviour: BounceBehaviour = BounceBehaviour.OBSTRUCTION


@dataclass
class MoveInput:
    """Desired movement direction; its length scales the acceleration."""

    value: Vec3 = field(default_factory=lambda: np.zeros(3))
    _previous: Vec3 = field(default_factory=lambda: np.zeros(3), init=False, repr=False)

    def __post_init__(self) -> None:
        self.value = as_vec3(self.value)

    def update(self) -> Vec3:
        """Move the current value to the previous one, clear it and return it."""
        self._previous = self.value
        self.value = np.zeros(3)
        return self._previous

    def set(self, value) -> None:
        self.value = as_vec3(value)

    def previous(self) -> Vec3:
        return self._previous


@dataclass(frozen=True)
class BrakeFactor:
    """Braking against reverse and sideways motion."""

    reverse: float = 0.0
    lateral: float = 0.0

    @classmethod
    def all(cls, value: float) -> BrakeFactor:
        return cls(reverse=value, lateral=value)


BrakeFactor.ZERO = BrakeFactor.all(0.0)
BrakeFactor.ONE = BrakeFactor.all(1.0)


def jump(impulse: float, velocity, grounding: Grounding, up) -> Vec3:
    """Return the velocity after jumping; detaches ``grounding`` from its ground."""
    up = as_vec3(up)
    v = reject_from(velocity, up)

    ground = grounding.detach()
    if ground is not None:
        # Push the character away from ramps.
        push = ground.normal * min(float(np.dot(v, ground.normal)), 0.0)
        vertical = project_onto(push, up)
        horizontal = push - vertical
        direction = try_direction(v)
        if direction is not None:
            horizontal = project_onto(horizontal, direction)
        v = v - (horizontal + vertical)

    return v + up * impulse


def _aabb_min(shape, rotation) -> Vec3:
    radius = float(getattr(shape, "radius", shape))
    return np.full(3, -radius)


def feet_offset(shape, rotation, up, skin_width: float) -> Vec3:
    """Offset from a shape's centre to its feet along ``up``, including the skin."""
    up = as_vec3(up)
    down = float(np.dot(_aabb_min(shape, rotation), up)) - skin_width
    return up * down


def feet_position(shape, translation, rotation, up, skin_width: float) -> Vec3:
    """World position of a shape's feet."""
    return as_vec3(translation) + feet_offset(shape, rotation, up, skin_width)


def drag_factor(drag: float, delta: float) -> float:
    return math.exp(-drag * delta)


def friction_factor(velocity, friction: float, delta: float) -> float:
    """Factor for a constant deceleration against the velocity."""
    v = as_vec3(velocity)
    speed_sq = float(np.dot(v, v))
    if speed_sq < 1e-4:
        return 0.0
    return math.exp(-friction / math.sqrt(speed_sq) * delta)


def acceleration(velocity, direction, max_acceleration: float, target_speed: float, delta: float) -> Vec3:
    """Acceleration along ``direction`` that does not go past ``target_speed``."""
    v = as_vec3(velocity)
    d = as_vec3(direction)
    current_speed = float(np.dot(v, d))
    if current_speed >= target_speed:
        return np.zeros(3)
    accel_speed = min(target_speed - current_speed, max_acceleration * delta)
    return d * accel_speed


def acceleration_with_brake(
    velocity,
    direction,
    max_acceleration: float,
    target_speed: float,
    brake_factor: BrakeFactor,
    delta: float,
) -> Vec3:
    """Acceleration with extra braking against reverse and lateral motion."""
    v = as_vec3(velocity)
    d = as_vec3(direction)
    current_speed = float(np.dot(v, d))
    if current_speed >= target_speed:
        return np.zeros(3)

    accel_speed = min(target_speed - current_speed, max_acceleration * delta)
    accel = d * accel_speed

    if float(np.dot(v, v)) < 1e-6:
        return accel

    if current_speed < 0.0 and abs(brake_factor.reverse) > 0.0:
        rev_brake_speed = min(max_acceleration * brake_factor.reverse * delta, -current_speed)
        accel = accel + d * rev_brake_speed

    if abs(brake_factor.lateral) > 0.0:
        perp_vel = v - d * current_speed
        accel = accel - clamp_length_max(perp_vel, max_acceleration * brake_factor.lateral * delta)

    new_vel = v + accel
    if float(np.dot(new_vel, new_vel)) <= target_speed * target_speed:
        return accel

    speed = float(np.linalg.norm(v))
    vel_dir = v / speed
    par_speed = float(np.dot(accel, vel_dir))
    perp_accel = accel - vel_dir * par_speed
    max_par_speed = max(0.0, target_speed - speed)
    par_accel = vel_dir * min(max_par_speed, par_speed)
    return perp_accel + par_accel


def apply_gravity(
    velocity,
    character_gravity: CharacterGravity,
    default_gravity,
    grounding: Grounding | None,
    gravity_scale: float | None,
    delta: float,
) -> Vec3:
    """Return the velocity after gravity; grounded characters are unaffected."""
    v = as_vec3(velocity)
    if grounding is not None and grounding.is_grounded():
        return v
    gravity = character_gravity.value if character_gravity.value is not None else as_vec3(default_gravity)
    if gravity_scale is not None:
        gravity = gravity * gravity_scale
    return v + gravity * delta


def apply_friction(
    velocity,
    grounding: Grounding,
    friction: GroundFriction,
    friction_scale: float | None,
    delta: float,
) -> Vec3:
    """Return the velocity after ground friction; airborne characters are unaffected."""
    v = as_vec3(velocity)
    if grounding.ground() is None:
        return v
    amount = friction.value
    if friction_scale is not None:
        amount *= friction_scale
    return v * friction_factor(v, amount, delta)


def apply_drag(velocity, drag: CharacterDrag, delta: float) -> Vec3:
    return as_vec3(velocity) * drag_factor(drag.value, delta)


def apply_acceleration(
    move_input: MoveInput,
    velocity,
    movement: CharacterMovement,
    grounding: Grounding | None,
    grounding_config: GroundingConfig | None,
    brake_factor: BrakeFactor | None,
    delta: float,
) -> Vec3:
    """Return the velocity after accelerating towards the move input."""
    v = as_vec3(velocity)
    split = direction_and_length(move_input.value)
    if split is None:
        return v
    direction, throttle = split
    current = v

    if grounding is not None and grounding_config is not None:
        up = grounding_config.up_direction
        normal = grounding.normal()
        if normal is not None:
            direction = align_with_surface(direction, normal, up)
            current = align_with_surface(current, normal, up)
        if brake_factor is not None:
            current = reject_from(current, up)

    max_acceleration = movement.acceleration * throttle
    if brake_factor is None:
        accel = acceleration(current, direction, max_acceleration, movement.target_speed, delta)
    else:
        accel = acceleration_with_brake(
            current, direction, max_acceleration, movement.target_speed, brake_factor, delta
        )
    return v + accel


def bounce_on_hit(
    velocity,
    bounce: CharacterBounce,
    grounding: Grounding | None,
    hit_velocity,
    surface: Surface,
) -> Vec3:
    """Return the velocity after bouncing off ``surface``; strong bounces detach from the ground."""
    v = as_vec3(velocity)
    behaviour = bounce.behaviour
    if behaviour is BounceBehaviour.NEVER:
        return v
    if behaviour is BounceBehaviour.GROUND and not surface.is_walkable:
        return v
    if behaviour is BounceBehaviour.OBSTRUCTION and surface.is_walkable:
        return v

    bounce_impulse = -float(np.dot(as_vec3(hit_velocity), surface.normal)) * bounce.restitution
    v = v + surface.normal * bounce_impulse

    if bounce_impulse > 0.1 and grounding is not None:
        grounding.detach()
    return v