"""
Mode Controller Module - Gesture Mode State Machine
===================================================
Tracks the current GestureMode and fires transition actions only when the
mode actually changes:
- leaving DRAW or ERASE  -> STROKE_END (finalize / reset smoothing)
- leaving SELECT         -> SELECT_EXIT (drop cursor and dwell state)
- entering SHAPE         -> SHAPE_ENTER (promote the last stroke)
- any change             -> MODE_CHANGE (status display)
"""

from enum import Enum, auto
from typing import Callable, Dict

from visionboard.gesture_logic import GestureMode


class TransitionEvent(Enum):
    """Actions fired by a mode change, in firing order."""
    STROKE_END = auto()
    SELECT_EXIT = auto()
    SHAPE_ENTER = auto()
    MODE_CHANGE = auto()


TransitionCallback = Callable[[GestureMode, GestureMode], None]

STROKE_MODES = (GestureMode.DRAW, GestureMode.ERASE)


class ModeTransitionController:
    """
    Single-writer state machine over GestureMode.

    Starts in IDLE and runs for as long as frames arrive.
    """

    def __init__(self, initial: GestureMode = GestureMode.IDLE):
        self.mode = initial
        self._callbacks: Dict[TransitionEvent, TransitionCallback] = {}

    def register_callback(self, event: TransitionEvent, callback: TransitionCallback):
        """
        Register the action for a transition event.

        Args:
            event: The event to react to
            callback: Called with (old_mode, new_mode)
        """
        self._callbacks[event] = callback

    def update(self, mode: GestureMode) -> bool:
        """
        Move to a newly classified mode.

        Returns:
            True if a transition happened
        """
        old = self.mode
        if mode == old:
            return False

        # Finalize before promotion so SHAPE can act on the stroke just ended
        if old in STROKE_MODES:
            self._fire(TransitionEvent.STROKE_END, old, mode)
        if old == GestureMode.SELECT:
            self._fire(TransitionEvent.SELECT_EXIT, old, mode)

        self.mode = mode

        if mode == GestureMode.SHAPE:
            self._fire(TransitionEvent.SHAPE_ENTER, old, mode)
        self._fire(TransitionEvent.MODE_CHANGE, old, mode)
        return True

    def _fire(self, event: TransitionEvent, old: GestureMode, new: GestureMode):
        callback = self._callbacks.get(event)
        if callback:
            callback(old, new)
