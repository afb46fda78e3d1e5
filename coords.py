# coords.py
"""
Mapping between world coordinates and canvas (display pixel) coordinates.

The drift kernel never calls into this module; it exists for the rendering
and pointer-input side of the application. World +y points up, canvas +y
points down.
"""
from typing import NamedTuple, Tuple
from constants import DOMAIN_MIN_X, DOMAIN_MAX_X, DOMAIN_MIN_Y, DOMAIN_MAX_Y

Point = Tuple[float, float]


class DomainBounds(NamedTuple):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


DEFAULT_BOUNDS = DomainBounds(DOMAIN_MIN_X, DOMAIN_MAX_X, DOMAIN_MIN_Y, DOMAIN_MAX_Y)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def world_to_canvas(point: Point, width: float, height: float, bounds: DomainBounds) -> Point:
    """Maps a world point to canvas pixels (may fall outside the canvas)."""
    sx = (point[0] - bounds.min_x) / (bounds.max_x - bounds.min_x)
    sy = (point[1] - bounds.min_y) / (bounds.max_y - bounds.min_y)
    return (sx * width, (1.0 - sy) * height)


def canvas_to_world(point: Point, width: float, height: float, bounds: DomainBounds) -> Point:
    """
    Maps canvas pixels to a world point.

    The normalized canvas position is clamped to [0, 1] first, so a pointer
    dragged outside the canvas still lands on the domain edge.
    """
    sx = clamp(point[0] / width, 0.0, 1.0)
    sy = clamp(1.0 - point[1] / height, 0.0, 1.0)
    return (
        bounds.min_x + sx * (bounds.max_x - bounds.min_x),
        bounds.min_y + sy * (bounds.max_y - bounds.min_y),
    )
