"""
Smartboard Module - Per-Frame Processing Context
================================================
Owns all mutable drawing state (canvas layers, history, live stroke,
dwell timer, brush settings) and advances it once per video frame.

Frames must be processed one at a time; nothing here is thread-safe and
nothing needs to be as long as a single caller drives process_frame().
"""

import time
from enum import Enum, auto
from typing import Any, Callable, Dict, Optional, Tuple

from visionboard.canvas import Canvas, Color
from visionboard.gesture_logic import GestureClassifier, GestureMode, GestureReading
from visionboard.history import DrawingHistory
from visionboard.landmarks import Hand
from visionboard.mode_controller import ModeTransitionController, TransitionEvent
from visionboard.selection import (
    COLOR_OPTIONS, HoverTarget, SelectionDwellController, SelectionMenu, TargetKind
)
from visionboard.shape_fitter import ShapeFitter
from visionboard.stroke import StrokeAccumulator


class BoardEvent(Enum):
    """Notifications for the presentation layer."""
    MODE_CHANGE = auto()       # value: new GestureMode
    COLOR_CHANGE = auto()      # value: BGR color
    SIZE_CHANGE = auto()       # value: brush size
    SHAPE_PROMOTED = auto()    # value: promoted StoredPath


class Smartboard:
    """
    Gesture-to-drawing engine.

    Usage:
        board = Smartboard(1280, 720)
        # In frame loop:
        reading = board.process_frame(landmarks)
    """

    DEFAULT_COLOR = COLOR_OPTIONS[1].value  # Blue
    DEFAULT_BRUSH_SIZE = 8

    def __init__(
        self,
        width: int = 1280,
        height: int = 720,
        classifier: Optional[GestureClassifier] = None,
        fitter: Optional[ShapeFitter] = None,
        menu: Optional[SelectionMenu] = None,
        dwell_duration: float = SelectionDwellController.DWELL_DURATION,
        show_debug: bool = True
    ):
        """
        Initialize the smartboard.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            classifier: Gesture classifier (default thresholds if None)
            fitter: Shape fitter used for promoted strokes
            menu: Palette layout for SELECT mode
            dwell_duration: Seconds to hold a palette option
            show_debug: Draw the hand skeleton on the debug layer
        """
        self.canvas = Canvas(width, height)
        self.history = DrawingHistory(self.canvas, fitter)
        self.accumulator = StrokeAccumulator(self.canvas)
        self.classifier = classifier or GestureClassifier()
        self.menu = menu or SelectionMenu()
        self.dwell = SelectionDwellController(dwell_duration)
        self.modes = ModeTransitionController()
        self.show_debug = show_debug

        self.color: Color = self.DEFAULT_COLOR
        self.brush_size: int = self.DEFAULT_BRUSH_SIZE
        self.cursor: Optional[Tuple[float, float]] = None

        self._callbacks: Dict[BoardEvent, Callable[[Any], None]] = {}
        self._now = 0.0

        self.modes.register_callback(TransitionEvent.STROKE_END, self._on_stroke_end)
        self.modes.register_callback(TransitionEvent.SELECT_EXIT, self._on_select_exit)
        self.modes.register_callback(TransitionEvent.SHAPE_ENTER, self._on_shape_enter)
        self.modes.register_callback(TransitionEvent.MODE_CHANGE, self._on_mode_change)

    # Status outputs
    @property
    def mode(self) -> GestureMode:
        return self.modes.mode

    @property
    def hover_target(self) -> Optional[HoverTarget]:
        return self.dwell.hover_target

    @property
    def selection_progress(self) -> float:
        return self.dwell.progress

    @property
    def cursor_px(self) -> Optional[Tuple[int, int]]:
        """Cursor in canvas pixels, or None outside SELECT."""
        if self.cursor is None:
            return None
        x, y = self.cursor
        return (int(x * self.canvas.width), int(y * self.canvas.height))

    def register_callback(self, event: BoardEvent, callback: Callable[[Any], None]):
        """Register a listener for a board event."""
        self._callbacks[event] = callback

    def _emit(self, event: BoardEvent, value: Any):
        callback = self._callbacks.get(event)
        if callback:
            callback(value)

    # Frame processing
    def process_frame(self, hand: Optional[Hand], now: Optional[float] = None) -> GestureReading:
        """
        Advance the board by one video frame.

        Args:
            hand: 21 landmarks of the tracked hand, or None
            now: Frame timestamp in seconds (defaults to time.time())

        Returns:
            The classification of this frame
        """
        self._now = time.time() if now is None else now
        reading = self.classifier.classify(hand)

        if self.show_debug:
            self.canvas.draw_hand(hand)

        # Transition actions run before the new mode acts
        self.modes.update(reading.mode)

        if reading.mode == GestureMode.DRAW:
            self.accumulator.draw(reading.index_tip, self.color, self.brush_size)
        elif reading.mode == GestureMode.ERASE:
            self.accumulator.erase(reading.index_tip, self.brush_size)
        elif reading.mode == GestureMode.SELECT:
            self._select(reading.cursor)
        elif reading.mode == GestureMode.CLEAR:
            self.history.clear_all()

        return reading

    def _select(self, cursor: Tuple[float, float]):
        self.cursor = cursor
        target = self.menu.target_at(*cursor)

        if target is None:
            self.dwell.reset()
            return

        committed = self.dwell.update(target, self._now)
        if committed is not None:
            self.apply_option(committed)

    def apply_option(self, option: HoverTarget):
        """Apply a committed palette option."""
        if option.kind is TargetKind.COLOR:
            self.set_color(option.value)
        else:
            self.set_brush_size(option.value)

    def set_color(self, color: Color):
        """Set the brush color (BGR)."""
        self.color = color
        self._emit(BoardEvent.COLOR_CHANGE, color)

    def set_brush_size(self, size: int):
        """Set the brush thickness."""
        self.brush_size = max(1, int(size))
        self._emit(BoardEvent.SIZE_CHANGE, self.brush_size)

    def resize(self, width: int, height: int) -> bool:
        """
        Resize every layer and redraw the history onto the new surface.

        Returns:
            True if the size changed
        """
        if (width, height) == (self.canvas.width, self.canvas.height):
            return False

        # Live points are in the old pixel space; keep them as a finished stroke
        self._finish_stroke(is_shape=False)
        self.canvas.resize(width, height)
        self.history.redraw_all()
        return True

    def snapshot_png(self) -> bytes:
        """PNG of the permanent drawing, for the critic."""
        return self.canvas.snapshot_png()

    # Transition actions
    def _finish_stroke(self, is_shape: bool):
        points = self.accumulator.finish()
        if not points:
            return

        path = self.history.append(
            points, self.color, self.brush_size, is_shape=is_shape, now=self._now
        )
        if is_shape:
            self.canvas.flash(self._now)
            self._emit(BoardEvent.SHAPE_PROMOTED, path)

    def _on_stroke_end(self, old: GestureMode, new: GestureMode):
        self._finish_stroke(is_shape=(new == GestureMode.SHAPE))

    def _on_select_exit(self, old: GestureMode, new: GestureMode):
        self.cursor = None
        self.dwell.reset()

    def _on_shape_enter(self, old: GestureMode, new: GestureMode):
        if self.history.promote_last(self._now):
            self._emit(BoardEvent.SHAPE_PROMOTED, self.history.last)

    def _on_mode_change(self, old: GestureMode, new: GestureMode):
        self._emit(BoardEvent.MODE_CHANGE, new)
