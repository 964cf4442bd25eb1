import numpy as np
import pytest

from docscan.imaging.buffers import (
    Contour,
    PipelineParameters,
    PixelBuffer,
    Point,
    Quadrilateral,
    ScalarField,
    ScanMode,
)


def test_pixel_buffer_dimensions_match_samples():
    buffer = PixelBuffer(np.zeros((3, 5, 4), dtype=np.uint8))

    assert (buffer.width, buffer.height, buffer.channels) == (5, 3, 4)
    assert buffer.samples.size == buffer.width * buffer.height * buffer.channels


@pytest.mark.parametrize(
    "samples",
    [
        np.zeros((3, 5, 2), dtype=np.uint8),
        np.zeros((3, 5, 3), dtype=np.float32),
        np.zeros((3, 5), dtype=np.uint8),
        np.zeros((0, 5, 3), dtype=np.uint8),
    ],
)
def test_pixel_buffer_rejects_malformed_samples(samples):
    with pytest.raises(ValueError):
        PixelBuffer(samples)


def test_from_array_copies_and_adds_channel_axis():
    gray = np.full((2, 2), 7, dtype=np.uint8)
    buffer = PixelBuffer.from_array(gray)
    gray[0, 0] = 99

    assert buffer.channels == 1
    assert buffer.samples[0, 0, 0] == 7


def test_scalar_field_accepts_only_byte_or_float():
    assert ScalarField(np.zeros((2, 2), dtype=np.uint8)).is_integer
    assert not ScalarField(np.zeros((2, 2), dtype=np.float64)).is_integer
    with pytest.raises(ValueError):
        ScalarField(np.zeros((2, 2), dtype=np.int32))


def test_contour_coordinates_follow_point_order():
    contour = Contour([Point(3, 1), Point(0, 2)])

    xs, ys = contour.coordinates()

    assert contour.size == 2
    assert xs.tolist() == [3, 0]
    assert ys.tolist() == [1, 2]


def test_quadrilateral_lists_corners_clockwise_from_top_left():
    quad = Quadrilateral(Point(0, 0), Point(4, 0), Point(4, 3), Point(0, 3))

    assert quad.as_list() == [Point(0, 0), Point(4, 0), Point(4, 3), Point(0, 3)]


@pytest.mark.parametrize("contrast,brightness", [(0.9, 10), (2.1, 10), (1.5, -1), (1.5, 51)])
def test_parameters_reject_out_of_range_values(contrast, brightness):
    with pytest.raises(ValueError):
        PipelineParameters(contrast=contrast, brightness=brightness).validate()


def test_parameters_accept_range_limits():
    PipelineParameters(contrast=1.0, brightness=0).validate()
    PipelineParameters(contrast=2.0, brightness=50).validate()


@pytest.mark.parametrize("raw,expected", [("AUTO", ScanMode.AUTO), ("enhance", ScanMode.ENHANCE), ("black_white", ScanMode.BLACK_WHITE), ("bw", ScanMode.BLACK_WHITE)])
def test_scan_mode_parse(raw, expected):
    assert ScanMode.parse(raw) is expected


def test_scan_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        ScanMode.parse("sepia")
