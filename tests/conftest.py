import pytest

from visionboard.canvas import Canvas


@pytest.fixture
def canvas():
    return Canvas(640, 480)
