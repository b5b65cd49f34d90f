"""
UI Module - Main Application Interface
======================================
OpenCV window around the smartboard: camera backdrop, drawing layers,
side palettes, dwell cursor, status bar and AI critique panel.
"""

import argparse
import os
import textwrap
import time
from typing import Optional

import cv2
import numpy as np
from dotenv import find_dotenv, load_dotenv

from visionboard.camera import Camera, CameraError, FrameCamera
from visionboard.critic import CritiqueResult, SketchCritic, create_critic
from visionboard.gesture_logic import GestureMode, get_mode_info
from visionboard.hand_tracking import HandTracker
from visionboard.landmarks import LandmarkSource
from visionboard.selection import HoverTarget
from visionboard.smartboard import BoardEvent, Smartboard


class VisionBoardApp:
    """
    Interactive gesture smartboard.

    Collaborators can be injected for testing; by default a webcam,
    a MediaPipe tracker and a critic chosen from the environment are used.
    """

    WINDOW_NAME = "VisionBoard"
    CAMERA_TIMEOUT = 10.0  # Seconds to wait for the first frame

    # UI Colors (BGR)
    UI_BG_COLOR = (30, 23, 15)
    UI_ACCENT_COLOR = (246, 130, 59)
    UI_TEXT_COLOR = (255, 255, 255)
    UI_MUTED_COLOR = (150, 150, 150)
    UI_ERROR_COLOR = (68, 68, 239)

    MODE_COLORS = {
        GestureMode.DRAW: (246, 130, 59),
        GestureMode.ERASE: (68, 68, 239),
        GestureMode.SELECT: (247, 85, 168),
        GestureMode.SHAPE: (129, 185, 16),
    }

    def __init__(
        self,
        camera: Optional[FrameCamera] = None,
        tracker: Optional[LandmarkSource] = None,
        critic: Optional[SketchCritic] = None,
        width: int = 1280,
        height: int = 720,
        show_debug: bool = True
    ):
        """
        Initialize the application.

        Args:
            camera: Frame source (webcam if None)
            tracker: Landmark source with on_frame() and process(frame)
            critic: AI critic (chosen by create_critic() if None)
            width: Requested frame width
            height: Requested frame height
            show_debug: Show the hand skeleton overlay
        """
        self.camera = camera or Camera(width=width, height=height)
        self.tracker = tracker or HandTracker()
        self.critic = critic or create_critic()

        self.board = Smartboard(width, height, show_debug=show_debug)
        self.tracker.on_frame(self.board.process_frame)

        self._running = False
        self._status = ""
        self._critique: Optional[str] = None
        self._show_critique = False

        self.board.register_callback(BoardEvent.COLOR_CHANGE, self._on_color_change)
        self.board.register_callback(BoardEvent.SIZE_CHANGE, self._on_size_change)
        self.board.register_callback(BoardEvent.SHAPE_PROMOTED, self._on_shape_promoted)
        self.critic.set_on_complete(self._on_critique_complete)

    # Board callbacks
    def _on_color_change(self, color):
        self._status = "Color locked"

    def _on_size_change(self, size):
        self._status = f"Brush {size}px"

    def _on_shape_promoted(self, path):
        self._status = "Shape perfected"

    # Critique
    def analyze(self):
        """Send the current drawing to the critic."""
        if not self.board.canvas.has_content():
            self._status = "Board is empty!"
            return
        if self.critic.is_analyzing():
            self._status = "Analysis in progress..."
            return

        self._status = "Analyzing drawing..."
        self.critic.critique(self.board.snapshot_png(), async_mode=True)

    def _on_critique_complete(self, result: CritiqueResult):
        self._critique = result.text
        self._show_critique = True
        self._status = "Analysis complete" if result.success else "Analysis failed"

    # Frame handling
    def step(self, frame: np.ndarray, now: Optional[float] = None) -> np.ndarray:
        """
        Process one camera frame and build the display image.

        Args:
            frame: Unmirrored BGR camera frame
            now: Frame timestamp (defaults to time.time())

        Returns:
            Display image
        """
        now = time.time() if now is None else now
        h, w = frame.shape[:2]
        if (w, h) != (self.board.canvas.width, self.board.canvas.height):
            self.board.resize(w, h)

        self.tracker.process(frame)

        backdrop = cv2.flip(frame, 1)
        backdrop = cv2.GaussianBlur(backdrop, (9, 9), 0)
        backdrop = cv2.convertScaleAbs(backdrop, alpha=0.3, beta=0)

        display = self.board.canvas.compose(backdrop, now, show_debug=self.board.show_debug)
        display = self._draw_palettes(display)
        display = self._draw_cursor(display)
        display = self._draw_status(display)
        display = self._draw_critique(display)
        return display

    def _draw_palettes(self, frame: np.ndarray) -> np.ndarray:
        h, w = frame.shape[:2]
        menu = self.board.menu
        margin_px = int(w * menu.margin)
        hover = self.board.hover_target

        overlay = frame.copy()
        cv2.rectangle(overlay, (0, 0), (margin_px, h), (0, 0, 0), -1)
        cv2.rectangle(overlay, (w - margin_px, 0), (w, h), (0, 0, 0), -1)
        frame = cv2.addWeighted(overlay, 0.4, frame, 0.6, 0)

        slot_h = h / len(menu.colors)
        for i, option in enumerate(menu.colors):
            center = (margin_px // 2, int(slot_h * (i + 0.5)))
            radius = 28 if option.value == self.board.color else 20
            cv2.circle(frame, center, radius, option.value, -1, cv2.LINE_AA)
            self._outline_option(frame, center, radius, option, hover,
                                 option.value == self.board.color)

        slot_h = h / len(menu.sizes)
        for i, option in enumerate(menu.sizes):
            center = (w - margin_px // 2, int(slot_h * (i + 0.5)))
            dot = max(2, int(option.value / 1.5))
            cv2.circle(frame, center, dot, self.UI_TEXT_COLOR, -1, cv2.LINE_AA)
            cv2.putText(frame, option.label[0], (center[0] - 5, center[1] + dot + 18),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, self.UI_MUTED_COLOR, 1)
            self._outline_option(frame, center, 32, option, hover,
                                 option.value == self.board.brush_size)

        return frame

    def _outline_option(self, frame, center, radius, option: HoverTarget,
                        hover: Optional[HoverTarget], selected: bool):
        if selected:
            cv2.circle(frame, center, radius + 4, self.UI_TEXT_COLOR, 2, cv2.LINE_AA)
        if hover == option:
            cv2.circle(frame, center, radius + 9, self.UI_ACCENT_COLOR, 2, cv2.LINE_AA)

    def _draw_cursor(self, frame: np.ndarray) -> np.ndarray:
        cursor = self.board.cursor_px
        if cursor is None:
            return frame

        cv2.circle(frame, cursor, 28, (80, 80, 80), 3, cv2.LINE_AA)
        progress = self.board.selection_progress
        if progress > 0:
            # Dwell progress ring, clockwise from the top
            cv2.ellipse(frame, cursor, (28, 28), -90, 0, 360 * progress / 100,
                        self.UI_TEXT_COLOR, 4, cv2.LINE_AA)
        cv2.circle(frame, cursor, 4, self.UI_TEXT_COLOR, -1, cv2.LINE_AA)

        hover = self.board.hover_target
        if hover is not None:
            label = f"LOCKING {hover.kind.name}..."
            cv2.putText(frame, label, (cursor[0] - 60, cursor[1] - 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.UI_ACCENT_COLOR, 2)
        return frame

    def _draw_status(self, frame: np.ndarray) -> np.ndarray:
        h, w = frame.shape[:2]
        mode = self.board.mode
        info = get_mode_info(mode)

        cv2.rectangle(frame, (0, 0), (w, 44), self.UI_BG_COLOR, -1)
        cv2.putText(frame, "VisionBoard", (16, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, self.UI_TEXT_COLOR, 2)
        cv2.putText(frame, info['name'].upper(), (200, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                    self.MODE_COLORS.get(mode, self.UI_MUTED_COLOR), 2)
        cv2.putText(frame, info['description'], (320, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.UI_MUTED_COLOR, 1)

        if self._status:
            color = self.UI_ERROR_COLOR if "failed" in self._status else self.UI_ACCENT_COLOR
            cv2.putText(frame, self._status, (w - 280, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 2)

        cv2.putText(frame, "[A] Analyze | [H] Hide analysis | [Q] Quit",
                    (16, h - 16), cv2.FONT_HERSHEY_SIMPLEX, 0.45, self.UI_MUTED_COLOR, 1)
        return frame

    def _draw_critique(self, frame: np.ndarray) -> np.ndarray:
        if not self._show_critique or not self._critique:
            return frame

        h, w = frame.shape[:2]
        lines = textwrap.wrap(self._critique, width=42)[:10]
        panel_w = 380
        panel_h = 50 + 22 * len(lines)
        x = w - panel_w - int(w * self.board.menu.margin) - 20
        y = h - panel_h - 60

        cv2.rectangle(frame, (x, y), (x + panel_w, y + panel_h), self.UI_BG_COLOR, -1)
        cv2.rectangle(frame, (x, y), (x + panel_w, y + panel_h), self.UI_ACCENT_COLOR, 2)
        cv2.putText(frame, "AI ANALYSIS", (x + 14, y + 26),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.55, self.UI_ACCENT_COLOR, 2)
        for i, line in enumerate(lines):
            cv2.putText(frame, line, (x + 14, y + 52 + 22 * i),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.UI_TEXT_COLOR, 1)
        return frame

    def _handle_keyboard(self, key: int) -> bool:
        """
        Handle keyboard input.

        Returns:
            False if should quit, True otherwise
        """
        if key == ord('q') or key == 27:  # Q or Escape
            return False
        elif key == ord('a'):
            self.analyze()
        elif key == ord('h'):
            self._show_critique = not self._show_critique
        return True

    def run(self):
        """Run the main application loop."""
        print("\n" + "=" * 60)
        print("  VisionBoard - Gesture Smartboard")
        print("=" * 60)
        print("\nGestures:")
        print("  Index finger up          -> Draw")
        print("  Index + Middle + Ring    -> Perfect the last stroke")
        print("  Index + Middle up        -> Palette cursor (hover to select)")
        print("  Thumb + Index pinch      -> Erase")
        print("  Open palm                -> Clear board")
        print("\nKeyboard: [A] Analyze | [H] Hide analysis | [Q] Quit")
        print("\n" + "=" * 60)

        if not self.camera.start():
            print("[ERROR] Failed to start camera!")
            return

        try:
            self.camera.wait_for_frame(self.CAMERA_TIMEOUT)
        except CameraError as e:
            print(f"[ERROR] {e}")
            self.camera.stop()
            return

        self._running = True
        cv2.namedWindow(self.WINDOW_NAME, cv2.WINDOW_NORMAL)

        try:
            while self._running:
                frame = self.camera.get_frame()
                if frame is None:
                    time.sleep(0.001)
                    continue

                cv2.imshow(self.WINDOW_NAME, self.step(frame))

                key = cv2.waitKey(1) & 0xFF
                if not self._handle_keyboard(key):
                    break
        finally:
            self._running = False
            self.critic.cancel()
            self.camera.stop()
            self.tracker.release()
            cv2.destroyAllWindows()
            print("\n[INFO] Application closed")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="VisionBoard - Draw in the air with hand gestures")
    parser.add_argument('--camera', type=int, default=0, help='Camera device index')
    parser.add_argument('--width', type=int, default=1280, help='Requested frame width')
    parser.add_argument('--height', type=int, default=720, help='Requested frame height')
    parser.add_argument('--mock', action='store_true', help='Use mock critic (no API needed)')
    parser.add_argument('--no-debug', action='store_true', help='Hide the hand skeleton overlay')

    args = parser.parse_args()

    # Load environment variables from the .env file in the working directory
    load_dotenv(find_dotenv(usecwd=True))

    api_key = os.environ.get('HF_TOKEN') or os.environ.get('HF_API_KEY')
    if not args.mock and not api_key:
        print("\n[NOTE] HF_TOKEN not set. Using mock critic.")
        print("[NOTE] For real AI analysis, set HF_TOKEN in your .env file")
        args.mock = True

    app = VisionBoardApp(
        camera=Camera(camera_id=args.camera, width=args.width, height=args.height),
        critic=create_critic(use_mock=args.mock, api_key=api_key),
        width=args.width,
        height=args.height,
        show_debug=not args.no_debug
    )
    app.run()


if __name__ == "__main__":
    main()
