import pytest

from visionboard.gesture_logic import GestureMode
from visionboard.mode_controller import ModeTransitionController, TransitionEvent


@pytest.fixture
def recorded():
    controller = ModeTransitionController()
    events = []
    for event in TransitionEvent:
        controller.register_callback(
            event, lambda old, new, event=event: events.append((event, old, new))
        )
    return controller, events


def test_starts_idle():
    assert ModeTransitionController().mode == GestureMode.IDLE


def test_same_mode_fires_nothing(recorded):
    controller, events = recorded

    assert not controller.update(GestureMode.IDLE)
    assert events == []


def test_draw_to_shape_order(recorded):
    controller, events = recorded
    controller.update(GestureMode.DRAW)
    events.clear()

    assert controller.update(GestureMode.SHAPE)
    assert [e for e, _, _ in events] == [
        TransitionEvent.STROKE_END,
        TransitionEvent.SHAPE_ENTER,
        TransitionEvent.MODE_CHANGE,
    ]
    assert events[0][1:] == (GestureMode.DRAW, GestureMode.SHAPE)


def test_leaving_select(recorded):
    controller, events = recorded
    controller.update(GestureMode.SELECT)
    events.clear()

    controller.update(GestureMode.DRAW)

    assert [e for e, _, _ in events] == [TransitionEvent.SELECT_EXIT, TransitionEvent.MODE_CHANGE]


def test_leaving_erase_ends_stroke(recorded):
    controller, events = recorded
    controller.update(GestureMode.ERASE)
    events.clear()

    controller.update(GestureMode.IDLE)

    assert [e for e, _, _ in events] == [TransitionEvent.STROKE_END, TransitionEvent.MODE_CHANGE]


def test_mode_is_updated_before_shape_enter():
    controller = ModeTransitionController()
    seen = []
    controller.register_callback(
        TransitionEvent.SHAPE_ENTER, lambda old, new: seen.append(controller.mode)
    )

    controller.update(GestureMode.SHAPE)

    assert seen == [GestureMode.SHAPE]


def test_stays_in_shape_without_refiring(recorded):
    controller, events = recorded
    controller.update(GestureMode.SHAPE)
    events.clear()

    for _ in range(5):
        controller.update(GestureMode.SHAPE)

    assert events == []
