# brush.py
"""
Spatial editing of the attractor set.

Spray stamps insert points sampled uniformly inside a disc, erase stamps
remove every point inside a disc. The BrushEditor turns a stream of
world-space pointer events into stamps, resampling fast drags so that
consecutive stamps leave no gaps.
"""
import logging
import math
import numpy as np
from typing import List, Optional
from constants import (
    MIN_BRUSH_RADIUS, SPRAY_DENSITY, SPRAY_FALLOFF,
    STROKE_MAX_STEPS, STROKE_MIN_SPACING, STROKE_SPACING_FACTOR
)
from coords import DEFAULT_BOUNDS, DomainBounds, Point
from particle import AttractorSet
from rng import RandomSource

# --- Data Contracts ---
#
# spray_add(attractors, center, radius, rng, bounds) -> int:
#   - Outputs: number of inserted points, spray_count(radius).
#   - Side Effects: Grows attractor capacity as needed; draws two uniforms
#     per point (angle first, then radius) from `rng`.
#   - Invariants: every inserted point lies inside `bounds`.
#
# erase_in_radius(attractors, center, radius) -> int:
#   - Outputs: number of removed points.
#   - Side Effects: Compacts the live rows in place, preserving order.
#   - Invariants: idempotent for a fixed center and radius.


def _floor_radius(radius: float) -> float:
    return max(float(radius), MIN_BRUSH_RADIUS)


def spray_count(radius: float) -> int:
    """Points per stamp: brush area times a density that decays with radius."""
    radius = _floor_radius(radius)
    area = math.pi * radius * radius
    # Round half up.
    return max(1, int(math.floor(area * (SPRAY_DENSITY / (1.0 + radius * SPRAY_FALLOFF)) + 0.5)))


def spray_add(attractors: AttractorSet, center: Point, radius: float,
              rng: RandomSource, bounds: DomainBounds = DEFAULT_BOUNDS) -> int:
    radius = _floor_radius(radius)
    count = spray_count(radius)
    attractors.ensure_capacity(attractors.count + count)

    points = np.empty((count, 2), dtype=np.float64)
    for i in range(count):
        theta = rng.next() * math.pi * 2.0
        rr = math.sqrt(rng.next()) * radius
        points[i, 0] = center[0] + rr * math.cos(theta)
        points[i, 1] = center[1] + rr * math.sin(theta)
    np.clip(points[:, 0], bounds.min_x, bounds.max_x, out=points[:, 0])
    np.clip(points[:, 1], bounds.min_y, bounds.max_y, out=points[:, 1])

    attractors.append(points)
    return count


def erase_in_radius(attractors: AttractorSet, center: Point, radius: float) -> int:
    if attractors.count == 0:
        return 0
    radius = _floor_radius(radius)
    live = attractors.buffer[:attractors.count]
    d2 = (live[:, 0] - center[0]) ** 2 + (live[:, 1] - center[1]) ** 2
    keep = d2 > radius * radius
    kept = int(keep.sum())
    removed = attractors.count - kept
    if removed:
        # Boolean indexing copies before the assignment, so the in-place
        # compaction cannot read rows it has already overwritten.
        attractors.buffer[:kept] = live[keep]
        attractors.count = kept
    return removed


def interpolate_stroke(last: Point, point: Point, radius: float) -> List[Point]:
    """
    Intermediate stamp positions strictly between `last` and `point`.

    Spacing is proportional to the brush radius with a lower floor, and the
    number of stamps is capped so a very long jump stays cheap.
    """
    dx = point[0] - last[0]
    dy = point[1] - last[1]
    distance = math.hypot(dx, dy)
    spacing = max(STROKE_MIN_SPACING, _floor_radius(radius) * STROKE_SPACING_FACTOR)
    steps = max(1, min(STROKE_MAX_STEPS, int(math.floor(distance / spacing))))
    return [
        (last[0] + t * dx, last[1] + t * dy)
        for t in (s / (steps + 1) for s in range(1, steps + 1))
    ]


class BrushEditor:
    """
    Converts pointer events into spray or erase stamps on an AttractorSet.

    All methods are no-ops while edit mode is disabled.
    """
    def __init__(self, attractors: AttractorSet, radius: float,
                 bounds: DomainBounds = DEFAULT_BOUNDS):
        self.attractors = attractors
        self.bounds = bounds
        self.radius = _floor_radius(radius)
        self.enabled = False
        self.erase = False
        self.is_down = False
        self.last_point: Optional[Point] = None

    def set_radius(self, radius: float) -> None:
        self.radius = _floor_radius(radius)

    def stamp(self, point: Point, rng: RandomSource) -> int:
        """Applies one stamp; returns the number of points added or removed."""
        if self.erase:
            return erase_in_radius(self.attractors, point, self.radius)
        return spray_add(self.attractors, point, self.radius, rng, self.bounds)

    def pointer_down(self, point: Point, rng: RandomSource) -> None:
        if not self.enabled:
            return
        self.is_down = True
        self.stamp(point, rng)
        self.last_point = point

    def pointer_move(self, point: Point, rng: RandomSource) -> None:
        if not self.enabled or not self.is_down:
            return
        if self.last_point is not None:
            for q in interpolate_stroke(self.last_point, point, self.radius):
                self.stamp(q, rng)
        else:
            self.stamp(point, rng)
        self.last_point = point

    def pointer_up(self) -> None:
        if not self.enabled:
            return
        if self.is_down:
            logging.debug(
                f"Brush stroke finished ({'erase' if self.erase else 'spray'}), "
                f"{self.attractors.count} attractors."
            )
        self.is_down = False
        self.last_point = None
