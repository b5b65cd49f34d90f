"""
Gesture Logic Module - Landmarks to Interaction Mode
====================================================
Maps one frame's hand landmarks to a single interaction mode.
Checks run in a fixed priority order so a pose is never ambiguous:
CLEAR > SHAPE > ERASE > SELECT > DRAW > IDLE.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple

from visionboard.landmarks import (
    Hand, HandLandmark, Landmark, calculate_finger_states, is_complete, pinch_distance
)


class GestureMode(Enum):
    """Interaction modes of the smartboard."""
    IDLE = auto()       # No hand or unrecognized pose
    DRAW = auto()       # Index finger up
    SHAPE = auto()      # Index + middle + ring up - promote last stroke
    SELECT = auto()     # Index + middle up - palette cursor
    ERASE = auto()      # Thumb + index pinch
    CLEAR = auto()      # Four fingers up - wipe the board


@dataclass
class GestureReading:
    """
    Classification of one frame.

    Attributes:
        mode: The detected mode
        index_tip: Index fingertip landmark (None without a hand)
        cursor: Mirrored normalized cursor (x, y) from the index tip
        fingers: Extension state per finger
        pinch: Thumb-index distance in normalized units
    """
    mode: GestureMode
    index_tip: Optional[Landmark] = None
    cursor: Optional[Tuple[float, float]] = None
    fingers: Dict[str, bool] = field(default_factory=dict)
    pinch: Optional[float] = None


class GestureClassifier:
    """
    Pure per-frame classifier from landmarks to GestureMode.

    No temporal smoothing: each frame is judged on its own.
    """

    PINCH_THRESHOLD = 0.04  # Normalized thumb-index distance for ERASE

    def __init__(self, pinch_threshold: float = PINCH_THRESHOLD):
        self.pinch_threshold = pinch_threshold

    def classify(self, hand: Optional[Hand]) -> GestureReading:
        """
        Classify a hand pose.

        Args:
            hand: 21 landmarks, or None when no hand was detected

        Returns:
            GestureReading for this frame
        """
        if not is_complete(hand):
            return GestureReading(GestureMode.IDLE)

        fingers = calculate_finger_states(hand)
        pinch = pinch_distance(hand)
        index_tip = hand[HandLandmark.INDEX_TIP]
        cursor = (1 - index_tip.x, index_tip.y)

        mode = self._classify_mode(fingers, pinch)
        return GestureReading(mode, index_tip, cursor, fingers, pinch)

    def _classify_mode(self, fingers: Dict[str, bool], pinch: float) -> GestureMode:
        index = fingers['index']
        middle = fingers['middle']
        ring = fingers['ring']
        pinky = fingers['pinky']

        # 1. All four fingers - CLEAR
        if index and middle and ring and pinky:
            return GestureMode.CLEAR

        # 2. Three fingers - SHAPE
        if index and middle and ring:
            return GestureMode.SHAPE

        # 3. Thumb-index pinch - ERASE
        if pinch < self.pinch_threshold:
            return GestureMode.ERASE

        # 4. Index + middle - SELECT
        if index and middle:
            return GestureMode.SELECT

        # 5. Index alone - DRAW
        if index:
            return GestureMode.DRAW

        return GestureMode.IDLE


def get_mode_info(mode: GestureMode) -> dict:
    """
    Get display information about a mode.

    Returns:
        Dict with mode name and description
    """
    info = {
        GestureMode.IDLE: {
            'name': 'Idle',
            'description': 'Show your hand to start',
        },
        GestureMode.DRAW: {
            'name': 'Draw',
            'description': 'Index finger - draw',
        },
        GestureMode.SHAPE: {
            'name': 'Shape',
            'description': 'Three fingers - perfect the last stroke',
        },
        GestureMode.SELECT: {
            'name': 'Select',
            'description': 'Index + Middle - hover a palette',
        },
        GestureMode.ERASE: {
            'name': 'Erase',
            'description': 'Thumb pinch - erase',
        },
        GestureMode.CLEAR: {
            'name': 'Clear',
            'description': 'Open palm - clear the board',
        },
    }
    return info[mode]
