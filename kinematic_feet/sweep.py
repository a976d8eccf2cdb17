"""Shape sweeps against a simple spatial query world of half-spaces and spheres."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Hashable

import numpy as np

from .vectors import Vec3, as_vec3, normalize_or_zero

ALL_LAYERS = 0xFFFFFFFF


@dataclass(eq=False)
class SweepHitData:
    """A hit found by :func:`collision_sweep`; ``distance`` is the safe travel distance."""

    distance: float
    point: Vec3
    normal: Vec3
    entity: Hashable


@dataclass(frozen=True, eq=False)
class ShapeHit:
    """Raw result of a shape cast: contact point and outward normal of the hit collider."""

    entity: Hashable
    distance: float
    point1: Vec3
    normal1: Vec3


@dataclass(frozen=True, eq=False)
class RayHit:
    """Raw result of a ray cast."""

    entity: Hashable
    distance: float
    normal: Vec3


@dataclass(frozen=True)
class ShapeCastConfig:
    """Shape cast settings; a hit is reported once separation reaches ``target_distance``."""

    max_distance: float = math.inf
    target_distance: float = 0.0
    ignore_origin_penetration: bool = False


@dataclass
class QueryFilter:
    """Selects colliders by layer mask and excluded entities."""

    mask: int = ALL_LAYERS
    excluded_entities: set = field(default_factory=set)

    def accepts(self, entity: Hashable, layers: int) -> bool:
        return entity not in self.excluded_entities and bool(self.mask & layers)


@dataclass(frozen=True, eq=False)
class _HalfSpace:
    entity: Hashable
    normal: Vec3
    point: Vec3
    layers: int


@dataclass(frozen=True, eq=False)
class _Ball:
    entity: Hashable
    center: Vec3
    radius: float
    layers: int


def _radius_of(shape) -> float:
    radius = getattr(shape, "radius", shape)
    return float(radius)


class SpatialQuery:
    """A collection of static half-spaces and spheres that can be swept and ray cast.

    Cast shapes are spheres (a radius or any object with a ``radius``), so rotation
    has no effect on the result.
    """

    def __init__(self) -> None:
        self._colliders: list[_HalfSpace | _Ball] = []

    def add_half_space(self, entity, normal, point=(0.0, 0.0, 0.0), layers=ALL_LAYERS) -> None:
        n = normalize_or_zero(normal)
        if not np.any(n):
            raise ValueError("half-space normal must be non-zero")
        self._colliders.append(_HalfSpace(entity, n, as_vec3(point), layers))

    def add_sphere(self, entity, center, radius, layers=ALL_LAYERS) -> None:
        if radius <= 0:
            raise ValueError("sphere radius must be positive")
        self._colliders.append(_Ball(entity, as_vec3(center), float(radius), layers))

    def shape_hits(self, shape, origin, rotation, direction, config, query_filter) -> list[ShapeHit]:
        """Return every hit of the swept shape, nearest first."""
        radius = _radius_of(shape)
        o = as_vec3(origin)
        d = normalize_or_zero(direction)
        hits = []
        for collider in self._colliders:
            if not query_filter.accepts(collider.entity, collider.layers):
                continue
            if isinstance(collider, _HalfSpace):
                hit = self._cast_half_space(collider, radius, o, d, config)
            else:
                hit = self._cast_ball(collider, radius, o, d, config)
            if hit is not None:
                hits.append(hit)
        hits.sort(key=lambda h: h.distance)
        return hits

    @staticmethod
    def _cast_half_space(plane, radius, o, d, config):
        n = plane.normal
        separation = float(np.dot(o - plane.point, n)) - radius
        if separation < 0.0:
            if config.ignore_origin_penetration:
                return None
            t = 0.0
        elif separation <= config.target_distance:
            t = 0.0
        else:
            rate = float(np.dot(d, n))
            if rate >= 0.0:
                return None
            t = (separation - config.target_distance) / -rate
            if t > config.max_distance:
                return None
        center = o + d * t
        point = center - n * float(np.dot(center - plane.point, n))
        return ShapeHit(plane.entity, t, point, n.copy())

    @staticmethod
    def _cast_ball(ball, radius, o, d, config):
        offset = o - ball.center
        contact = radius + ball.radius
        distance = float(np.linalg.norm(offset))
        reach = contact + config.target_distance
        if distance < contact:
            if config.ignore_origin_penetration:
                return None
            t = 0.0
        elif distance <= reach:
            t = 0.0
        else:
            b = float(np.dot(offset, d))
            c = distance * distance - reach * reach
            disc = b * b - c
            if b >= 0.0 or disc < 0.0:
                return None
            t = -b - math.sqrt(disc)
            if t > config.max_distance:
                return None
        center = o + d * t
        normal = normalize_or_zero(center - ball.center)
        return ShapeHit(ball.entity, t, ball.center + normal * ball.radius, normal)

    def ray_hits(self, origin, direction, max_distance, solid, query_filter) -> list[RayHit]:
        """Return every ray hit within ``max_distance``, nearest first."""
        o = as_vec3(origin)
        d = normalize_or_zero(direction)
        hits = []
        for collider in self._colliders:
            if not query_filter.accepts(collider.entity, collider.layers):
                continue
            if isinstance(collider, _HalfSpace):
                height = float(np.dot(o - collider.point, collider.normal))
                if height < 0.0:
                    if solid:
                        hits.append(RayHit(collider.entity, 0.0, collider.normal.copy()))
                    continue
                rate = float(np.dot(d, collider.normal))
                if rate >= 0.0:
                    continue
                t = height / -rate
                if t <= max_distance:
                    hits.append(RayHit(collider.entity, t, collider.normal.copy()))
            else:
                offset = o - collider.center
                b = float(np.dot(offset, d))
                c = float(np.dot(offset, offset)) - collider.radius ** 2
                if c < 0.0 and solid:
                    hits.append(RayHit(collider.entity, 0.0, normalize_or_zero(offset)))
                    continue
                disc = b * b - c
                if disc < 0.0:
                    continue
                if c < 0.0:
                    t = -b + math.sqrt(disc)
                    point = o + d * t
                    normal = -normalize_or_zero(point - collider.center)
                else:
                    if b > 0.0:
                        continue
                    t = -b - math.sqrt(disc)
                    normal = normalize_or_zero(o + d * t - collider.center)
                if t <= max_distance:
                    hits.append(RayHit(collider.entity, t, normal))
        hits.sort(key=lambda h: h.distance)
        return hits


def collision_sweep(
    shape,
    origin,
    rotation,
    direction,
    max_distance: float,
    skin_width: float,
    query: SpatialQuery,
    query_filter: QueryFilter,
    ignore_origin_penetration: bool,
    filter_hits: Callable[[SweepHitData], bool],
) -> SweepHitData | None:
    """Return the first hit accepted by ``filter_hits`` with its skin-adjusted distance."""
    config = ShapeCastConfig(
        max_distance=max_distance + skin_width,
        target_distance=skin_width,
        ignore_origin_penetration=ignore_origin_penetration,
    )
    for raw in query.shape_hits(shape, origin, rotation, direction, config, query_filter):
        hit = SweepHitData(
            distance=raw.distance - skin_width,
            point=raw.point1,
            normal=raw.normal1,
            entity=raw.entity,
        )
        if filter_hits(hit):
            return hit
    return None