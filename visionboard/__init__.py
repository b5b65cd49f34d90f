# VisionBoard - Gesture-Driven Smartboard with Shape Recognition
# Author: VisionBoard Team
# Version: 1.0.0

"""
Core modules for the gesture smartboard:
- geometry: Distance, bounding box and path length helpers
- landmarks: Hand landmark types and finger states
- shape_fitter: Line / ellipse / rectangle regularization
- canvas: Live, permanent and debug raster layers
- history: Finalized strokes with retroactive shape promotion
- stroke: Smoothed live stroke accumulation
- gesture_logic: Landmarks to interaction mode
- selection: Dwell-time palette selection
- mode_controller: Actions fired on mode changes
- smartboard: Per-frame processing context
- camera: Threaded webcam capture
- hand_tracking: MediaPipe landmark source
- critic: AI critique of the drawing
- ui: Main application interface
"""

__version__ = "1.0.0"
__author__ = "VisionBoard Team"
