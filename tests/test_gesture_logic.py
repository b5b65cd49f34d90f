import pytest

from visionboard.gesture_logic import GestureClassifier, GestureMode, get_mode_info
from visionboard.landmarks import Landmark, calculate_finger_states, pinch_distance

from tests.helpers import make_hand


@pytest.fixture
def classifier():
    return GestureClassifier()


def test_no_hand_is_idle(classifier):
    reading = classifier.classify(None)

    assert reading.mode is GestureMode.IDLE
    assert reading.index_tip is None
    assert reading.cursor is None


def test_incomplete_hand_is_idle(classifier):
    assert classifier.classify([Landmark(0.5, 0.5)] * 5).mode is GestureMode.IDLE


@pytest.mark.parametrize("extended, expected", [
    (('index', 'middle', 'ring', 'pinky'), GestureMode.CLEAR),
    (('index', 'middle', 'ring'), GestureMode.SHAPE),
    (('index', 'middle'), GestureMode.SELECT),
    (('index',), GestureMode.DRAW),
    ((), GestureMode.IDLE),
    (('pinky',), GestureMode.IDLE),
])
def test_finger_poses(classifier, extended, expected):
    assert classifier.classify(make_hand(extended)).mode is expected


def test_clear_wins_over_pinch(classifier):
    hand = make_hand(('index', 'middle', 'ring', 'pinky'), pinch=True)

    assert pinch_distance(hand) < GestureClassifier.PINCH_THRESHOLD
    assert classifier.classify(hand).mode is GestureMode.CLEAR


def test_shape_wins_over_pinch(classifier):
    hand = make_hand(('index', 'middle', 'ring'), pinch=True)
    assert classifier.classify(hand).mode is GestureMode.SHAPE


def test_pinch_wins_over_select_and_draw(classifier):
    assert classifier.classify(make_hand(('index', 'middle'), pinch=True)).mode is GestureMode.ERASE
    assert classifier.classify(make_hand(('index',), pinch=True)).mode is GestureMode.ERASE
    assert classifier.classify(make_hand((), pinch=True)).mode is GestureMode.ERASE


def test_draw_with_ring_up_but_middle_down(classifier):
    assert classifier.classify(make_hand(('index', 'ring'))).mode is GestureMode.DRAW


def test_cursor_is_mirrored(classifier):
    reading = classifier.classify(make_hand(('index', 'middle'), index_tip=(0.95, 0.1)))

    assert reading.cursor == pytest.approx((0.05, 0.1))
    assert reading.index_tip == Landmark(0.95, 0.1)


def test_custom_pinch_threshold():
    hand = make_hand(('index',))
    hand[4] = Landmark(hand[8].x + 0.06, hand[8].y)

    assert GestureClassifier().classify(hand).mode is GestureMode.DRAW
    assert GestureClassifier(pinch_threshold=0.1).classify(hand).mode is GestureMode.ERASE


def test_finger_states_use_pip_joint():
    states = calculate_finger_states(make_hand(('index', 'pinky')))
    assert states == {'index': True, 'middle': False, 'ring': False, 'pinky': True}


def test_every_mode_has_display_info():
    for mode in GestureMode:
        assert get_mode_info(mode)['name']


def test_reading_carries_finger_states_and_pinch(classifier):
    reading = classifier.classify(make_hand(('index', 'middle'), pinch=True))

    assert reading.mode is GestureMode.ERASE
    assert reading.fingers == {'index': True, 'middle': True, 'ring': False, 'pinky': False}
    assert reading.pinch == pytest.approx(0.01)


def test_reading_without_hand_has_no_measurements(classifier):
    reading = classifier.classify(None)

    assert reading.fingers == {}
    assert reading.pinch is None
