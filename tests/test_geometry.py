import pytest

from visionboard.geometry import Point, bounding_box, distance, path_length


def test_distance():
    assert distance(Point(0, 0), Point(3, 4)) == 5


def test_bounding_box():
    box = bounding_box([Point(10, 40), Point(30, 20), Point(20, 60)])

    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (10, 20, 30, 60)
    assert box.width == 20
    assert box.height == 40
    assert box.center == Point(20, 40)


def test_bounding_box_rejects_empty():
    with pytest.raises(ValueError):
        bounding_box([])


def test_path_length():
    points = [Point(0, 0), Point(3, 4), Point(3, 10)]
    assert path_length(points) == 11


def test_path_length_of_single_point_is_zero():
    assert path_length([Point(5, 5)]) == 0


def test_to_pixel_rounds():
    assert Point(10.6, 3.2).to_pixel() == (11, 3)
