import pytest

from visionboard.canvas import Layer
from visionboard.geometry import Point
from visionboard.history import DrawingHistory
from visionboard.shape_fitter import ShapeKind

from tests.helpers import ellipse_points, square_points


BLUE = (246, 130, 59)


@pytest.fixture
def history(canvas):
    return DrawingHistory(canvas)


def test_append_stores_and_draws(history, canvas):
    path = history.append([Point(10, 10), Point(100, 10)], BLUE, 6, now=5.0)

    assert len(history) == 1
    assert history.last is path
    assert path.finalized_at == 5.0
    assert not path.is_shape
    assert canvas.layer(Layer.PERMANENT)[10, 50, 3] == 255


def test_append_as_shape_renders_regularized(history):
    history.append(ellipse_points(300, 200, 100, 60, jitter=0.05), BLUE, 6, is_shape=True, now=0.0)

    assert history.redraw_all() == [ShapeKind.ELLIPSE]


def test_promote_within_window(history, canvas):
    history.append(ellipse_points(320, 240, 100, 100, jitter=0.08), BLUE, 6, now=0.0)

    assert history.promote_last(now=0.9)
    assert history.last.is_shape
    assert canvas.is_flashing(0.9)


def test_promote_after_window_is_noop(history):
    history.append(ellipse_points(320, 240, 100, 100), BLUE, 6, now=0.0)

    assert not history.promote_last(now=1.1)
    assert not history.last.is_shape


def test_promote_twice_is_noop(history):
    history.append(ellipse_points(320, 240, 100, 100), BLUE, 6, now=0.0)

    assert history.promote_last(now=0.2)
    assert not history.promote_last(now=0.3)


def test_promote_empty_history(history):
    assert not history.promote_last(now=0.0)


def test_only_last_path_is_promoted(history):
    first = history.append(square_points(50, 50, 100), BLUE, 6, now=0.0)
    second = history.append(ellipse_points(400, 300, 60, 60), BLUE, 6, now=0.1)

    assert history.promote_last(now=0.5)
    assert second.is_shape
    assert not first.is_shape


def test_promotion_keeps_original_points(history):
    points = ellipse_points(320, 240, 100, 100, jitter=0.08)
    history.append(points, BLUE, 6, now=0.0)

    history.promote_last(now=0.5)

    assert history.last.points == tuple(points)


def test_promoted_circle_redraws_as_ellipse(history, canvas):
    history.append(ellipse_points(320, 240, 100, 100, jitter=0.08), BLUE, 6, now=0.0)
    history.promote_last(now=0.5)

    assert history.redraw_all() == [ShapeKind.ELLIPSE]
    # The jagged inward vertices are gone; a smooth rim remains at 108px
    assert canvas.layer(Layer.PERMANENT)[240, 428, 3] == 255


def test_redraw_is_idempotent(history, canvas):
    history.append(square_points(50, 50, 100), BLUE, 6, is_shape=True, now=0.0)
    history.append([Point(300, 300), Point(350, 320)], BLUE, 4, now=0.1)
    history.append(ellipse_points(400, 200, 80, 50), BLUE, 6, is_shape=True, now=0.2)

    first = history.redraw_all()
    pixels = canvas.layer(Layer.PERMANENT).copy()
    second = history.redraw_all()

    assert first == second == [ShapeKind.RECTANGLE, ShapeKind.NONE, ShapeKind.ELLIPSE]
    assert (canvas.layer(Layer.PERMANENT) == pixels).all()


def test_clear_all(history, canvas):
    for i in range(3):
        history.append(square_points(20 + 150 * i, 50, 100), BLUE, 6, is_shape=True, now=i)

    history.clear_all()

    assert len(history) == 0
    assert not canvas.has_content()
