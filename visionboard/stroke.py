"""
Stroke Module - Live Stroke Accumulation
========================================
Turns raw fingertip landmarks into smoothed canvas points. Drawing goes to
the live layer and is buffered for finalization; erasing cuts directly
into the permanent layer and is never buffered.
"""

from typing import List, Optional

from visionboard.canvas import Canvas, Color, Layer
from visionboard.geometry import Point
from visionboard.landmarks import Landmark


class StrokeAccumulator:
    """
    Exponentially smoothed stroke builder.

    Attributes:
        canvas: Target canvas
        smoothing_factor: Weight of the new target point (0-1)
    """

    SMOOTHING_FACTOR = 0.35
    ERASER_SCALE = 6  # Eraser width relative to brush width

    def __init__(self, canvas: Canvas, smoothing_factor: float = SMOOTHING_FACTOR):
        self.canvas = canvas
        self.smoothing_factor = smoothing_factor

        self._last_point: Optional[Point] = None
        self._raw_path: List[Point] = []

    @property
    def last_point(self) -> Optional[Point]:
        return self._last_point

    @property
    def raw_path(self) -> List[Point]:
        """Points of the stroke in progress (copy)."""
        return list(self._raw_path)

    def to_canvas(self, landmark: Landmark) -> Point:
        """Map a normalized landmark to mirrored canvas pixels."""
        return Point((1 - landmark.x) * self.canvas.width, landmark.y * self.canvas.height)

    def _smooth(self, target: Point) -> Point:
        last = self._last_point
        if last is None:
            return target
        a = self.smoothing_factor
        return Point(last.x + (target.x - last.x) * a, last.y + (target.y - last.y) * a)

    def draw(self, landmark: Landmark, color: Color, width: int) -> Point:
        """
        Extend the live stroke toward a fingertip position.

        Returns:
            The smoothed point appended to the raw path
        """
        point = self._smooth(self.to_canvas(landmark))
        self.canvas.draw_segment(self._last_point, point, color, width, Layer.LIVE)
        self._raw_path.append(point)
        self._last_point = point
        return point

    def erase(self, landmark: Landmark, brush_width: int) -> Point:
        """Erase along the smoothed fingertip path on the permanent layer."""
        point = self._smooth(self.to_canvas(landmark))
        self.canvas.erase_segment(self._last_point, point, brush_width * self.ERASER_SCALE)
        self._last_point = point
        return point

    def finish(self) -> List[Point]:
        """
        End the current stroke.

        Clears the live layer, resets smoothing and hands back the raw path.
        """
        points = self._raw_path
        self._raw_path = []
        self._last_point = None
        self.canvas.clear(Layer.LIVE)
        return points
