"""
Landmarks Module - Hand Landmark Types
======================================
Types shared between the landmark detector and the drawing core.
A detected hand is a sequence of 21 normalized landmarks indexed by
HandLandmark; x and y lie in [0, 1] image space (y = 0 is the top).
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, Protocol, Sequence

import numpy as np


class HandLandmark(IntEnum):
    """
    MediaPipe hand landmark indices.
    Reference: https://mediapipe.dev/images/mobile/hand_landmarks.png
    """
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


NUM_LANDMARKS = 21


@dataclass(frozen=True)
class Landmark:
    """One normalized hand landmark (x, y in [0, 1], z relative depth)."""
    x: float
    y: float
    z: float = 0.0

    def distance_2d(self, other: 'Landmark') -> float:
        """Planar distance to another landmark, ignoring depth."""
        return math.hypot(self.x - other.x, self.y - other.y)


Hand = Sequence[Landmark]
LandmarkHandler = Callable[[Optional[Hand]], None]


# Fingertip and PIP joint per finger (thumb handled by pinch distance)
FINGER_JOINTS = {
    'index': (HandLandmark.INDEX_TIP, HandLandmark.INDEX_PIP),
    'middle': (HandLandmark.MIDDLE_TIP, HandLandmark.MIDDLE_PIP),
    'ring': (HandLandmark.RING_TIP, HandLandmark.RING_PIP),
    'pinky': (HandLandmark.PINKY_TIP, HandLandmark.PINKY_PIP),
}

HAND_CONNECTIONS = [
    # Thumb
    (HandLandmark.WRIST, HandLandmark.THUMB_CMC),
    (HandLandmark.THUMB_CMC, HandLandmark.THUMB_MCP),
    (HandLandmark.THUMB_MCP, HandLandmark.THUMB_IP),
    (HandLandmark.THUMB_IP, HandLandmark.THUMB_TIP),
    # Index
    (HandLandmark.WRIST, HandLandmark.INDEX_MCP),
    (HandLandmark.INDEX_MCP, HandLandmark.INDEX_PIP),
    (HandLandmark.INDEX_PIP, HandLandmark.INDEX_DIP),
    (HandLandmark.INDEX_DIP, HandLandmark.INDEX_TIP),
    # Middle
    (HandLandmark.MIDDLE_MCP, HandLandmark.MIDDLE_PIP),
    (HandLandmark.MIDDLE_PIP, HandLandmark.MIDDLE_DIP),
    (HandLandmark.MIDDLE_DIP, HandLandmark.MIDDLE_TIP),
    # Ring
    (HandLandmark.RING_MCP, HandLandmark.RING_PIP),
    (HandLandmark.RING_PIP, HandLandmark.RING_DIP),
    (HandLandmark.RING_DIP, HandLandmark.RING_TIP),
    # Pinky
    (HandLandmark.WRIST, HandLandmark.PINKY_MCP),
    (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP),
    (HandLandmark.PINKY_PIP, HandLandmark.PINKY_DIP),
    (HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
    # Palm
    (HandLandmark.INDEX_MCP, HandLandmark.MIDDLE_MCP),
    (HandLandmark.MIDDLE_MCP, HandLandmark.RING_MCP),
    (HandLandmark.RING_MCP, HandLandmark.PINKY_MCP),
]


class LandmarkSource(Protocol):
    """Anything that delivers zero or one hand per video frame."""

    def on_frame(self, handler: LandmarkHandler) -> None:
        ...

    def process(self, frame: np.ndarray) -> Optional[Hand]:
        ...

    def release(self) -> None:
        ...


def is_complete(hand: Optional[Hand]) -> bool:
    """True when a hand with all 21 landmarks is present."""
    return hand is not None and len(hand) >= NUM_LANDMARKS


def calculate_finger_states(hand: Hand) -> Dict[str, bool]:
    """
    Determine which of the four fingers are extended.

    A finger counts as extended when its tip is strictly above its PIP
    joint (smaller y in image space).

    Args:
        hand: 21 landmarks

    Returns:
        Dict with 'index', 'middle', 'ring', 'pinky' extension flags
    """
    return {
        finger: hand[tip].y < hand[pip].y
        for finger, (tip, pip) in FINGER_JOINTS.items()
    }


def pinch_distance(hand: Hand) -> float:
    """Distance between the thumb tip and index tip (normalized units)."""
    return hand[HandLandmark.THUMB_TIP].distance_2d(hand[HandLandmark.INDEX_TIP])
