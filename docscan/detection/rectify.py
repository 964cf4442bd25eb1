"""Crop-and-resample approximation of perspective unwarping."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import logging
import math

from PIL import Image

from docscan.imaging.buffers import PixelBuffer, Quadrilateral
from docscan.imaging.codec import from_pil, to_pil

from .errors import StageFailure
from .tone import enhance

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RectifiedGeometry:
    corners: List[Tuple[float, float]]
    width: int
    height: int
    box: Tuple[float, float, float, float]


def _distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def scale_corners(quad: Quadrilateral, scale_x: float, scale_y: float) -> List[Tuple[float, float]]:
    return [(point.x * scale_x, point.y * scale_y) for point in quad.as_list()]


def plan_geometry(
    quad: Quadrilateral,
    working_size: Tuple[int, int],
    original_size: Tuple[int, int],
) -> RectifiedGeometry:
    """Map working-resolution corners to the original and size the output."""
    working_width, working_height = working_size
    original_width, original_height = original_size
    corners = scale_corners(
        quad,
        original_width / working_width,
        original_height / working_height,
    )
    top_left, top_right, bottom_right, bottom_left = corners
    width = max(_distance(top_left, top_right), _distance(bottom_left, bottom_right))
    height = max(_distance(top_left, bottom_left), _distance(top_right, bottom_right))

    xs = [x for x, _ in corners]
    ys = [y for _, y in corners]
    box = (min(xs), min(ys), max(xs), max(ys))
    return RectifiedGeometry(corners=corners, width=int(width), height=int(height), box=box)


def rectify(
    original: PixelBuffer,
    quad: Quadrilateral,
    working_size: Tuple[int, int],
    contrast: float,
    brightness: float,
) -> Tuple[PixelBuffer, RectifiedGeometry]:
    geometry = plan_geometry(quad, working_size, original.size)
    left, top, right, bottom = geometry.box
    if geometry.width < 1 or geometry.height < 1 or right <= left or bottom <= top:
        raise StageFailure("rectify", f"degenerate target {geometry.width}x{geometry.height} from box {geometry.box}")

    LOGGER.debug(
        "Resampling box %s to %sx%s",
        tuple(round(value, 1) for value in geometry.box),
        geometry.width,
        geometry.height,
    )
    resampled = to_pil(original).resize(
        (geometry.width, geometry.height),
        resample=Image.BILINEAR,
        box=geometry.box,
    )
    return enhance(from_pil(resampled), contrast, brightness), geometry
