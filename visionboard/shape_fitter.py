"""
Shape Fitter Module - Perfect Shape Regularization
==================================================
Decides whether a hand-drawn path approximates a straight line, an
ellipse or a rectangle, and renders the regularized primitive.

Classification is intentionally cheap (bounding box plus a radial
variance test) so it can run on every finalized stroke and on every
history redraw. The check order is fixed:
closed test -> straight line -> circularity -> rectangle fallback.
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence

from visionboard.canvas import Canvas, Color
from visionboard.geometry import BoundingBox, Point, bounding_box, distance, path_length


class ShapeKind(Enum):
    """Primitive a path was regularized into."""
    NONE = auto()           # Free-form, render the original polyline
    LINE = auto()
    ELLIPSE = auto()
    RECTANGLE = auto()


@dataclass
class ShapeFit:
    """
    Result of fitting a path.

    Attributes:
        kind: Recognized primitive (NONE if free-form)
        box: Bounding box of the input points
        start: First point of the path
        end: Last point of the path
        closed: Whether the path was classified as closed
        circularity: RMS radial deviation (closed paths only)
    """
    kind: ShapeKind
    box: Optional[BoundingBox] = None
    start: Optional[Point] = None
    end: Optional[Point] = None
    closed: bool = False
    circularity: Optional[float] = None

    @property
    def recognized(self) -> bool:
        return self.kind is not ShapeKind.NONE


def circularity_rms(points: Sequence[Point], box: BoundingBox) -> float:
    """
    Root-mean-square deviation of the elliptical-normalized radius from 1.

    Zero-length axes are replaced by 1 so degenerate boxes never divide
    by zero.
    """
    center = box.center
    radius_x = box.width / 2 or 1.0
    radius_y = box.height / 2 or 1.0

    total = 0.0
    for p in points:
        d = math.sqrt(((p.x - center.x) / radius_x) ** 2 + ((p.y - center.y) / radius_y) ** 2)
        total += (d - 1) ** 2
    return math.sqrt(total / len(points))


class ShapeFitter:
    """
    Regularizes point sequences into line / ellipse / rectangle primitives.

    The fitter is deterministic: the same points always produce the same
    ShapeFit, which keeps history redraws idempotent.
    """

    MIN_POINTS = 12              # Shorter strokes are low-signal
    MIN_EXTENT = 20              # Pixels; tiny scribbles are not shapes
    CLOSE_RATIO = 0.2            # Endpoint gap relative to path length
    CLOSE_DISTANCE = 50          # Absolute endpoint gap in pixels
    STRAIGHTNESS_RATIO = 0.85    # Endpoint gap relative to path length
    CIRCULARITY_THRESHOLD = 0.18

    def __init__(
        self,
        min_points: int = MIN_POINTS,
        min_extent: float = MIN_EXTENT,
        close_ratio: float = CLOSE_RATIO,
        close_distance: float = CLOSE_DISTANCE,
        straightness_ratio: float = STRAIGHTNESS_RATIO,
        circularity_threshold: float = CIRCULARITY_THRESHOLD
    ):
        self.min_points = max(2, min_points)
        self.min_extent = min_extent
        self.close_ratio = close_ratio
        self.close_distance = close_distance
        self.straightness_ratio = straightness_ratio
        self.circularity_threshold = circularity_threshold

    def fit(self, points: Sequence[Point]) -> ShapeFit:
        """
        Classify a point sequence.

        Args:
            points: Ordered canvas points of one stroke

        Returns:
            ShapeFit describing the recognized primitive
        """
        if len(points) < self.min_points:
            return ShapeFit(ShapeKind.NONE)

        box = bounding_box(points)
        start, end = points[0], points[-1]

        if box.width < self.min_extent and box.height < self.min_extent:
            return ShapeFit(ShapeKind.NONE, box, start, end)

        endpoint_gap = distance(start, end)
        length = path_length(points)
        closed = endpoint_gap < length * self.close_ratio or endpoint_gap < self.close_distance

        if not closed:
            if endpoint_gap > length * self.straightness_ratio:
                return ShapeFit(ShapeKind.LINE, box, start, end)
            return ShapeFit(ShapeKind.NONE, box, start, end)

        rms = circularity_rms(points, box)
        kind = ShapeKind.ELLIPSE if rms < self.circularity_threshold else ShapeKind.RECTANGLE
        return ShapeFit(kind, box, start, end, closed=True, circularity=rms)

    def render(
        self,
        canvas: Canvas,
        points: Sequence[Point],
        color: Color,
        width: int
    ) -> ShapeFit:
        """
        Fit the points and draw the result onto the permanent layer.

        Unrecognized paths are drawn as their original polyline.
        """
        fit = self.fit(points)

        if fit.kind is ShapeKind.LINE:
            canvas.draw_line(fit.start, fit.end, color, width)
        elif fit.kind is ShapeKind.ELLIPSE:
            canvas.draw_ellipse(fit.box.center, fit.box.width / 2, fit.box.height / 2, color, width)
        elif fit.kind is ShapeKind.RECTANGLE:
            canvas.draw_rectangle(fit.box, color, width)
        else:
            canvas.draw_polyline(points, color, width)

        return fit
