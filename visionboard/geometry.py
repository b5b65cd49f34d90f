"""
Geometry Module - Canvas Point Helpers
======================================
Pure functions over canvas-pixel points used by gesture classification
and shape fitting.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Point:
    """A 2D point in canvas-pixel space."""
    x: float
    y: float

    def to_pixel(self) -> Tuple[int, int]:
        """Return integer pixel coordinates for OpenCV drawing calls."""
        return (int(round(self.x)), int(round(self.y)))


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned bounding box of a point sequence.

    Attributes:
        min_x, min_y: Top-left corner
        max_x, max_y: Bottom-right corner
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """
    Compute the bounding box of a non-empty point sequence.

    Raises:
        ValueError: If points is empty
    """
    if not points:
        raise ValueError("bounding_box() requires at least one point")

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def path_length(points: Sequence[Point]) -> float:
    """Total polyline length: sum of consecutive segment distances."""
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))
