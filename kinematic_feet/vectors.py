"""Small helpers for working with 3D vectors stored as numpy arrays."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

Vec3 = np.ndarray


def as_vec3(value: Iterable[float] | np.ndarray) -> Vec3:
    """Return ``value`` as a float array of shape (3,)."""
    array = np.asarray(value, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"expected a 3D vector, got shape {array.shape}")
    return array.copy()


def normalize_or_zero(vector) -> Vec3:
    """Return the unit vector along ``vector``, or zero if it has no valid direction."""
    direction = try_direction(vector)
    return np.zeros(3) if direction is None else direction


def try_direction(vector) -> Vec3 | None:
    """Return the unit vector along ``vector``, or None if it is zero or not finite."""
    result = direction_and_length(vector)
    return None if result is None else result[0]


def direction_and_length(vector) -> tuple[Vec3, float] | None:
    """Split ``vector`` into a unit direction and its length, or None if impossible."""
    v = as_vec3(vector)
    length = float(np.linalg.norm(v))
    if not math.isfinite(length) or length <= 0.0:
        return None
    direction = v / length
    if not np.all(np.isfinite(direction)):
        return None
    return direction, length


def project_onto(vector, other) -> Vec3:
    """Project ``vector`` onto ``other``; a zero ``other`` gives zero."""
    v = as_vec3(vector)
    o = as_vec3(other)
    denom = float(np.dot(o, o))
    if denom == 0.0:
        return np.zeros(3)
    return o * (float(np.dot(v, o)) / denom)


def reject_from(vector, other) -> Vec3:
    """Return the part of ``vector`` perpendicular to ``other``."""
    v = as_vec3(vector)
    return v - project_onto(v, other)


def angle_between(a, b) -> float:
    """Angle in radians between two vectors."""
    va = as_vec3(a)
    vb = as_vec3(b)
    denom = math.sqrt(float(np.dot(va, va)) * float(np.dot(vb, vb)))
    if denom == 0.0:
        return math.nan
    cos = float(np.dot(va, vb)) / denom
    return math.acos(max(-1.0, min(1.0, cos)))


def clamp_length_max(vector, max_length: float) -> Vec3:
    """Scale ``vector`` down so its length does not exceed ``max_length``."""
    v = as_vec3(vector)
    length = float(np.linalg.norm(v))
    if length > max_length and length > 0.0:
        return v * (max_length / length)
    return v