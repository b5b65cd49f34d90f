"""Builders for synthetic hands and stroke paths."""

import math

from visionboard.geometry import Point
from visionboard.landmarks import FINGER_JOINTS, HandLandmark, Landmark


def make_hand(extended=(), pinch=False, index_tip=None):
    """
    Build 21 landmarks with the given fingers extended.

    Args:
        extended: Names of extended fingers ('index', 'middle', 'ring', 'pinky')
        pinch: Put the thumb tip right next to the index tip
        index_tip: Optional (x, y) for the index fingertip
    """
    points = [Landmark(0.5, 0.8) for _ in range(21)]

    for i, (finger, (tip, pip)) in enumerate(FINGER_JOINTS.items()):
        x = 0.4 + 0.05 * i
        points[pip] = Landmark(x, 0.5)
        points[tip] = Landmark(x, 0.3 if finger in extended else 0.65)

    if index_tip is not None:
        x, y = index_tip
        up = 'index' in extended
        points[HandLandmark.INDEX_TIP] = Landmark(x, y)
        points[HandLandmark.INDEX_PIP] = Landmark(x, y + 0.05 if up else y - 0.05)

    tip = points[HandLandmark.INDEX_TIP]
    if pinch:
        points[HandLandmark.THUMB_TIP] = Landmark(tip.x + 0.01, tip.y)
    else:
        points[HandLandmark.THUMB_TIP] = Landmark(0.05, 0.95)

    return points


def ellipse_points(cx, cy, rx, ry, n=24, jitter=0.0):
    """Closed ellipse path; jitter alternates the radius by +/- jitter."""
    points = []
    for i in range(n + 1):
        theta = 2 * math.pi * i / n
        scale = 1 + (jitter if i % 2 == 0 else -jitter)
        points.append(Point(cx + rx * scale * math.cos(theta), cy + ry * scale * math.sin(theta)))
    return points


def square_points(x0, y0, side, per_edge=10):
    """Closed square path starting and ending at the top-left corner."""
    corners = [(x0, y0), (x0 + side, y0), (x0 + side, y0 + side), (x0, y0 + side), (x0, y0)]
    points = []
    for (ax, ay), (bx, by) in zip(corners, corners[1:]):
        for i in range(per_edge):
            t = i / per_edge
            points.append(Point(ax + (bx - ax) * t, ay + (by - ay) * t))
    points.append(Point(x0, y0))
    return points


