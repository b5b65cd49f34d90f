"""
History Module - Finalized Drawing History
==========================================
Keeps every finalized stroke in insertion order and replays them onto the
permanent layer. History only grows, except for a full clear. The single
permitted mutation is promoting the most recent stroke into a shape
shortly after it was finalized.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from visionboard.canvas import Canvas, Color, Layer
from visionboard.geometry import Point
from visionboard.shape_fitter import ShapeFitter, ShapeKind


@dataclass
class StoredPath:
    """
    A finalized stroke.

    Attributes:
        points: Original smoothed points (kept even after promotion)
        color: BGR color of the stroke
        width: Line thickness
        is_shape: Whether the path is rendered through the shape fitter
        finalized_at: When the stroke entered the history
    """
    points: Tuple[Point, ...]
    color: Color
    width: int
    is_shape: bool = False
    finalized_at: float = 0.0


class DrawingHistory:
    """
    Append-only stroke history bound to a canvas.

    Entries are addressed by index; promotion updates the last entry in place.
    """

    PROMOTION_WINDOW = 1.0  # Seconds after finalization

    def __init__(
        self,
        canvas: Canvas,
        fitter: Optional[ShapeFitter] = None,
        promotion_window: float = PROMOTION_WINDOW
    ):
        self.canvas = canvas
        self.fitter = fitter or ShapeFitter()
        self.promotion_window = promotion_window
        self._paths: List[StoredPath] = []

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def last(self) -> Optional[StoredPath]:
        return self._paths[-1] if self._paths else None

    def append(
        self,
        points: Sequence[Point],
        color: Color,
        width: int,
        is_shape: bool = False,
        now: Optional[float] = None
    ) -> StoredPath:
        """
        Finalize a stroke into the history and draw it.

        Args:
            points: Smoothed stroke points
            color: Stroke color (BGR)
            width: Stroke thickness
            is_shape: Render through the shape fitter
            now: Finalization timestamp (defaults to time.time())

        Returns:
            The stored path
        """
        path = StoredPath(
            points=tuple(points),
            color=color,
            width=width,
            is_shape=is_shape,
            finalized_at=time.time() if now is None else now
        )
        self._paths.append(path)
        self._render(path)
        return path

    def clear_all(self):
        """Drop every stored path and wipe the permanent layer."""
        self._paths.clear()
        self.canvas.clear(Layer.PERMANENT)

    def can_promote(self, now: float) -> bool:
        """Whether the latest entry is still inside the promotion window."""
        last = self.last
        if last is None or last.is_shape:
            return False
        return now - last.finalized_at < self.promotion_window

    def promote_last(self, now: Optional[float] = None) -> bool:
        """
        Turn the most recent stroke into a regularized shape.

        A no-op when the history is empty, the last entry is already a
        shape, or the promotion window has passed.

        Returns:
            True if the stroke was promoted
        """
        now = time.time() if now is None else now
        if not self.can_promote(now):
            return False

        self._paths[-1].is_shape = True
        self.redraw_all()
        self.canvas.flash(now)
        return True

    def redraw_all(self) -> List[ShapeKind]:
        """
        Clear the permanent layer and replay every path in order.

        Returns:
            The shape kind each path rendered as (NONE for plain strokes)
        """
        self.canvas.clear(Layer.PERMANENT)
        return [self._render(path) for path in self._paths]

    def _render(self, path: StoredPath) -> ShapeKind:
        if path.is_shape:
            return self.fitter.render(self.canvas, path.points, path.color, path.width).kind

        self.canvas.draw_polyline(path.points, path.color, path.width)
        return ShapeKind.NONE
