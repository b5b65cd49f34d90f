"""
Hand Tracking Module - MediaPipe Landmark Source
===============================================
Runs the MediaPipe Hand Landmarker (Tasks API, VIDEO mode) on camera
frames and hands the first detected hand to a registered handler as
21 normalized Landmarks. Only one hand is tracked.
"""

import time
import urllib.request
from pathlib import Path
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from visionboard.landmarks import Landmark, LandmarkHandler


MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)


def _download_model(model_path: Path) -> None:
    """Fetch hand_landmarker.task into model_path."""
    print("[INFO] Downloading hand landmarker model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)
    urllib.request.urlretrieve(MODEL_URL, model_path)
    print(f"[INFO] Model downloaded to {model_path}")


class HandTracker:
    """
    Single-hand landmark source backed by MediaPipe.

    Usage:
        tracker = HandTracker()
        tracker.on_frame(board.process_frame)
        # In frame loop:
        tracker.process(frame)
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.7,
        min_tracking_confidence: float = 0.7,
        model_path: Optional[Path] = None
    ):
        """
        Load the landmarker model (downloading it on first use).

        Args:
            min_detection_confidence: Detection and presence threshold
            min_tracking_confidence: Tracking threshold between frames
            model_path: Location of hand_landmarker.task (downloaded if missing)
        """
        self._model_path = model_path or Path(__file__).parent.parent / "models" / "hand_landmarker.task"
        if not self._model_path.exists():
            _download_model(self._model_path)

        base_options = python.BaseOptions(model_asset_path=str(self._model_path))
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_hands=1,
            min_hand_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            min_hand_presence_confidence=min_detection_confidence
        )
        self.detector = vision.HandLandmarker.create_from_options(options)

        # VIDEO mode needs monotonically increasing timestamps
        self._start_time = time.monotonic()
        self._last_timestamp_ms = -1

        self._handler: Optional[LandmarkHandler] = None

    def on_frame(self, handler: LandmarkHandler):
        """Register the callback that receives each frame's hand (or None)."""
        self._handler = handler

    def detect(self, frame: np.ndarray) -> Optional[List[Landmark]]:
        """
        Detect the hand in a BGR frame.

        Returns:
            21 Landmarks of the first hand, or None
        """
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        timestamp_ms = int((time.monotonic() - self._start_time) * 1000)
        timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        results = self.detector.detect_for_video(mp_image, timestamp_ms)
        if not results.hand_landmarks:
            return None

        return [Landmark(lm.x, lm.y, lm.z) for lm in results.hand_landmarks[0]]

    def process(self, frame: np.ndarray) -> Optional[List[Landmark]]:
        """Detect the hand and deliver it to the registered handler."""
        hand = self.detect(frame)
        if self._handler is not None:
            self._handler(hand)
        return hand

    def release(self):
        """Release resources."""
        if self.detector:
            self.detector.close()
            self.detector = None
