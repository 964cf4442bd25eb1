import numpy as np
import pytest

from docscan.detection.errors import StageFailure
from docscan.detection.rectify import plan_geometry, rectify
from docscan.imaging.buffers import PixelBuffer, Point, Quadrilateral

from conftest import uniform_array


def _rect(left, top, right, bottom):
    return Quadrilateral(Point(left, top), Point(right, top), Point(right, bottom), Point(left, bottom))


def test_plan_uses_longest_opposite_sides():
    quad = Quadrilateral(Point(100, 100), Point(500, 100), Point(480, 380), Point(120, 400))

    geometry = plan_geometry(quad, (800, 600), (800, 600))

    assert geometry.width == 400
    assert geometry.height == 300
    assert geometry.box == (100, 100, 500, 400)


def test_plan_scales_corners_back_to_original_resolution():
    geometry = plan_geometry(_rect(50, 50, 250, 200), (400, 300), (800, 600))

    assert geometry.corners == [(100.0, 100.0), (500.0, 100.0), (500.0, 400.0), (100.0, 400.0)]
    assert (geometry.width, geometry.height) == (400, 300)


def test_rectify_output_size_follows_corner_geometry():
    original = PixelBuffer(uniform_array(800, 600, 100))

    image, geometry = rectify(original, _rect(100, 100, 500, 400), (800, 600), contrast=1.4, brightness=15)

    assert image.size == (400, 300)
    assert geometry.box == (100, 100, 500, 400)


def test_rectify_applies_linear_enhancement():
    original = PixelBuffer(uniform_array(800, 600, 100))

    image, _ = rectify(original, _rect(100, 100, 500, 400), (800, 600), contrast=1.4, brightness=15)

    assert (image.samples[:, :, :3] == 155).all()
    assert (image.samples[:, :, 3] == 255).all()


def test_rectify_crops_the_bounding_box():
    samples = uniform_array(200, 100, 0)
    samples[20:80, 50:150, :3] = 200
    original = PixelBuffer(samples)

    image, _ = rectify(original, _rect(50, 20, 150, 80), (200, 100), contrast=1.0, brightness=0)

    assert image.size == (100, 60)
    assert image.samples[30, 50, 0] == 200
    assert original.samples[0, 0, 0] == 0


def test_degenerate_corners_raise_stage_failure():
    original = PixelBuffer(uniform_array(50, 50, 10))
    point = Point(5, 5)

    with pytest.raises(StageFailure) as excinfo:
        rectify(original, Quadrilateral(point, point, point, point), (50, 50), 1.4, 15)

    assert excinfo.value.stage == "rectify"
