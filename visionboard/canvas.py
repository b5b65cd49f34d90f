"""
Canvas Module - Smartboard Raster Layers
========================================
Provides the three transparent layers of the smartboard:
- live: the stroke currently being drawn
- permanent: finalized history (and erasures)
- debug: per-frame hand skeleton overlay

Layers are BGRA images so they can be composited over the camera feed.
Resizing a layer discards its content; callers redraw afterwards.
"""

import io
from enum import Enum, auto
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from visionboard.geometry import BoundingBox, Point
from visionboard.landmarks import HAND_CONNECTIONS, Hand, HandLandmark, is_complete


Color = Tuple[int, int, int]


class Layer(Enum):
    """Raster layers owned by the canvas."""
    LIVE = auto()
    PERMANENT = auto()
    DEBUG = auto()


FINGERTIPS = (
    HandLandmark.THUMB_TIP, HandLandmark.INDEX_TIP, HandLandmark.MIDDLE_TIP,
    HandLandmark.RING_TIP, HandLandmark.PINKY_TIP,
)


class Canvas:
    """
    Layered drawing surface.

    All coordinates are canvas pixels. Colors are BGR tuples; the alpha
    channel is managed internally (255 = ink, 0 = transparent).
    """

    FLASH_DURATION = 0.25
    FLASH_COLOR = (255, 255, 255)
    BACKGROUND_COLOR = (23, 6, 2)   # Slate night
    DEBUG_COLOR = (255, 255, 255)
    DEBUG_TIP_COLOR = (246, 130, 59)

    def __init__(self, width: int = 1280, height: int = 720):
        """
        Initialize the canvas.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
        """
        self.width = width
        self.height = height
        self._layers = {layer: self._blank() for layer in Layer}
        self._flash_until = 0.0

    def _blank(self) -> np.ndarray:
        return np.zeros((self.height, self.width, 4), dtype=np.uint8)

    def layer(self, layer: Layer) -> np.ndarray:
        """Return the raw BGRA array of a layer."""
        return self._layers[layer]

    # Drawing primitives
    def draw_segment(
        self,
        start: Optional[Point],
        end: Point,
        color: Color,
        width: int,
        layer: Layer = Layer.LIVE
    ):
        """
        Draw one round-capped segment of a stroke.

        With no start point a single dot is drawn at end.
        """
        image = self._layers[layer]
        thickness = max(1, int(width))
        ink = (*color, 255)

        if start is not None:
            cv2.line(image, start.to_pixel(), end.to_pixel(), ink, thickness, cv2.LINE_AA)
        cv2.circle(image, end.to_pixel(), max(1, thickness // 2), ink, -1, cv2.LINE_AA)

    def erase_segment(self, start: Optional[Point], end: Point, width: int):
        """Cut a transparent segment out of the permanent layer."""
        image = self._layers[Layer.PERMANENT]
        thickness = max(1, int(width))
        clear = (0, 0, 0, 0)

        if start is not None:
            cv2.line(image, start.to_pixel(), end.to_pixel(), clear, thickness)
        cv2.circle(image, end.to_pixel(), max(1, thickness // 2), clear, -1)

    def draw_polyline(self, points: Sequence[Point], color: Color, width: int):
        """Stroke a free-form path onto the permanent layer."""
        if not points:
            return
        if len(points) == 1:
            self.draw_segment(None, points[0], color, width, Layer.PERMANENT)
            return

        image = self._layers[Layer.PERMANENT]
        thickness = max(1, int(width))
        ink = (*color, 255)
        pts = np.array([p.to_pixel() for p in points], dtype=np.int32)

        cv2.polylines(image, [pts], False, ink, thickness, cv2.LINE_AA)
        # Round caps and joins
        for p in points:
            cv2.circle(image, p.to_pixel(), max(1, thickness // 2), ink, -1, cv2.LINE_AA)

    def draw_line(self, start: Point, end: Point, color: Color, width: int):
        """Draw a straight line onto the permanent layer."""
        self.draw_segment(None, start, color, width, Layer.PERMANENT)
        self.draw_segment(start, end, color, width, Layer.PERMANENT)

    def draw_ellipse(self, center: Point, radius_x: float, radius_y: float,
                     color: Color, width: int):
        """Draw an axis-aligned ellipse outline onto the permanent layer."""
        axes = (max(1, int(round(radius_x))), max(1, int(round(radius_y))))
        cv2.ellipse(
            self._layers[Layer.PERMANENT], center.to_pixel(), axes,
            0, 0, 360, (*color, 255), max(1, int(width)), cv2.LINE_AA
        )

    def draw_rectangle(self, box: BoundingBox, color: Color, width: int):
        """Draw a rectangle outline onto the permanent layer."""
        top_left = Point(box.min_x, box.min_y).to_pixel()
        bottom_right = Point(box.max_x, box.max_y).to_pixel()
        cv2.rectangle(
            self._layers[Layer.PERMANENT], top_left, bottom_right,
            (*color, 255), max(1, int(width)), cv2.LINE_AA
        )

    def draw_hand(self, hand: Optional[Hand]):
        """
        Redraw the debug layer with the hand skeleton.

        Landmarks are mirrored horizontally to line up with the drawing layers.
        """
        self.clear(Layer.DEBUG)
        if not is_complete(hand):
            return

        image = self._layers[Layer.DEBUG]
        pixels = [
            (int((1 - lm.x) * self.width), int(lm.y * self.height))
            for lm in hand
        ]

        for start, end in HAND_CONNECTIONS:
            cv2.line(image, pixels[start], pixels[end], (*self.DEBUG_COLOR, 160), 2)

        for idx, pixel in enumerate(pixels):
            if idx in FINGERTIPS:
                cv2.circle(image, pixel, 6, (*self.DEBUG_TIP_COLOR, 220), -1)
            else:
                cv2.circle(image, pixel, 3, (*self.DEBUG_COLOR, 160), -1)

    # Layer management
    def clear(self, layer: Layer):
        """Clear one layer to full transparency."""
        self._layers[layer][:] = 0

    def resize(self, new_width: int, new_height: int) -> bool:
        """
        Resize all layers. Content is lost; the caller must redraw.

        Returns:
            True if the size actually changed
        """
        if new_width == self.width and new_height == self.height:
            return False

        self.width = new_width
        self.height = new_height
        self._layers = {layer: self._blank() for layer in Layer}
        return True

    def flash(self, now: float):
        """Start a short highlight of the permanent layer."""
        self._flash_until = now + self.FLASH_DURATION

    def is_flashing(self, now: float) -> bool:
        return now < self._flash_until

    def has_content(self) -> bool:
        """Check if the permanent layer holds any ink."""
        return bool(np.any(self._layers[Layer.PERMANENT][:, :, 3]))

    # Output
    def compose(
        self,
        background: Optional[np.ndarray] = None,
        now: float = 0.0,
        show_debug: bool = True
    ) -> np.ndarray:
        """
        Alpha-blend the layers over a background frame.

        Args:
            background: BGR frame (resized to the canvas if needed);
                the board color is used when omitted
            now: Current time, used for the promotion flash
            show_debug: Whether to include the debug layer

        Returns:
            Composited BGR image
        """
        if background is None:
            result = np.full((self.height, self.width, 3), self.BACKGROUND_COLOR, dtype=np.uint8)
        elif background.shape[:2] != (self.height, self.width):
            result = cv2.resize(background, (self.width, self.height))
        else:
            result = background.copy()

        permanent = self._layers[Layer.PERMANENT]
        if self.is_flashing(now):
            permanent = permanent.copy()
            tint = np.array(self.FLASH_COLOR, dtype=np.float32)
            permanent[:, :, :3] = (permanent[:, :, :3] * 0.4 + tint * 0.6).astype(np.uint8)

        layers = [permanent, self._layers[Layer.LIVE]]
        if show_debug:
            layers.append(self._layers[Layer.DEBUG])

        for layer in layers:
            alpha = layer[:, :, 3:4].astype(np.float32) / 255.0
            result = (result * (1 - alpha) + layer[:, :, :3] * alpha).astype(np.uint8)

        return result

    def snapshot(self) -> np.ndarray:
        """Render the permanent layer alone on the board background (BGR)."""
        result = np.full((self.height, self.width, 3), self.BACKGROUND_COLOR, dtype=np.uint8)
        layer = self._layers[Layer.PERMANENT]
        alpha = layer[:, :, 3:4].astype(np.float32) / 255.0
        return (result * (1 - alpha) + layer[:, :, :3] * alpha).astype(np.uint8)

    def snapshot_png(self) -> bytes:
        """Encode the permanent layer snapshot as PNG bytes."""
        rgb = cv2.cvtColor(self.snapshot(), cv2.COLOR_BGR2RGB)
        buffer = io.BytesIO()
        Image.fromarray(rgb).save(buffer, format='PNG')
        return buffer.getvalue()
