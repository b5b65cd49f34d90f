"""
Camera Module - Threaded Webcam Capture
=======================================
Captures webcam frames on a background thread so the frame loop always
reads the latest frame. Frames are delivered unmirrored; the drawing core
mirrors landmark coordinates itself.
"""

import threading
import time
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np


class CameraError(RuntimeError):
    """The camera could not be opened or delivered no frames."""


class FrameCamera(Protocol):
    """Minimal camera capability used by the application."""

    def start(self) -> bool:
        ...

    def stop(self) -> None:
        ...

    def get_frame(self) -> Optional[np.ndarray]:
        ...

    def wait_for_frame(self, timeout: float) -> np.ndarray:
        ...


class Camera:
    """
    Threaded OpenCV webcam.

    Attributes:
        camera_id: OpenCV device index
        width: Frame width in pixels
        height: Frame height in pixels
        fps: Requested capture rate
    """

    def __init__(
        self,
        camera_id: int = 0,
        width: int = 1280,
        height: int = 720,
        fps: int = 30
    ):
        self.camera_id = camera_id
        self.width = width
        self.height = height
        self.fps = fps

        self.cap: Optional[cv2.VideoCapture] = None

        self._frame: Optional[np.ndarray] = None
        self._frame_lock = threading.Lock()
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> bool:
        """
        Open the device and start the capture thread.

        Returns:
            False if the device could not be opened
        """
        self.cap = cv2.VideoCapture(self.camera_id)

        if not self.cap.isOpened():
            print(f"[ERROR] Failed to open camera {self.camera_id}")
            self.cap.release()
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.fps)
        self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        # Actual resolution may differ from the request
        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)) or self.width
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) or self.height

        print(f"[INFO] Camera started: {self.width}x{self.height} @ {self.fps}fps")

        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        return True

    def _capture_loop(self):
        while self._running:
            ret, frame = self.cap.read()
            if ret:
                with self._frame_lock:
                    self._frame = frame
            else:
                time.sleep(0.001)

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Copy out the most recent frame.

        Returns:
            Tuple of (success, frame copy or None)
        """
        with self._frame_lock:
            if self._frame is None:
                return False, None
            return True, self._frame.copy()

    def get_frame(self) -> Optional[np.ndarray]:
        """Latest frame or None if nothing was captured yet."""
        ret, frame = self.read()
        return frame if ret else None

    def wait_for_frame(self, timeout: float = 10.0, interval: float = 0.1) -> np.ndarray:
        """
        Block until the first frame arrives.

        Args:
            timeout: Maximum seconds to wait
            interval: Polling interval in seconds

        Raises:
            CameraError: If no frame arrived in time
        """
        deadline = time.monotonic() + timeout
        while True:
            frame = self.get_frame()
            if frame is not None:
                return frame
            if time.monotonic() >= deadline:
                raise CameraError(
                    f"Camera {self.camera_id} delivered no frames within {timeout:.1f}s"
                )
            time.sleep(interval)

    def stop(self):
        """Stop the capture thread and release the device."""
        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        if self.cap is not None:
            self.cap.release()
            self.cap = None

        print("[INFO] Camera stopped")

    def __enter__(self):
        if not self.start():
            raise CameraError(f"Failed to open camera {self.camera_id}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
