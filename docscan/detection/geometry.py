"""Document corner estimation from traced contours."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import logging

import numpy as np

from docscan.imaging.buffers import Contour, Point, Quadrilateral

LOGGER = logging.getLogger(__name__)

MIN_AREA_RATIO = 0.1
MAX_AREA_RATIO = 0.95


def shoelace_area(points: Sequence[Point]) -> float:
    """Polygon area of the points taken in the given order, closed back to the first."""
    if len(points) < 3:
        return 0.0
    xs = np.fromiter((p.x for p in points), dtype=np.int64, count=len(points))
    ys = np.fromiter((p.y for p in points), dtype=np.int64, count=len(points))
    next_xs = np.roll(xs, -1)
    next_ys = np.roll(ys, -1)
    twice_area = int(np.sum(xs * next_ys - next_xs * ys))
    return abs(twice_area) / 2


def contour_area(contour: Contour) -> float:
    # traversal order, not boundary order: an approximation of the enclosed area
    return shoelace_area(contour.points)


def select_document_contour(contours: Iterable[Contour], width: int, height: int) -> Optional[Contour]:
    """Largest-area contour above the minimum share of the frame; first wins on ties."""
    min_area = width * height * MIN_AREA_RATIO
    best: Optional[Contour] = None
    best_area = 0.0
    for contour in contours:
        area = contour_area(contour)
        if area > best_area and area > min_area:
            best_area = area
            best = contour
    if best is not None:
        LOGGER.debug("Selected contour with %d points, area %.1f", best.size, best_area)
    return best


def extreme_corners(contour: Contour) -> Optional[Quadrilateral]:
    """Corners by extreme coordinate sums/differences, first point wins on ties.

    Ties follow the flood-fill visiting order, which is an artifact of the
    traversal rather than a geometric rule.
    """
    if contour.size < 4:
        return None
    xs, ys = contour.coordinates()
    points: List[Point] = contour.points
    return Quadrilateral(
        top_left=points[int(np.argmin(xs + ys))],
        top_right=points[int(np.argmax(xs - ys))],
        bottom_right=points[int(np.argmax(xs + ys))],
        bottom_left=points[int(np.argmax(ys - xs))],
    )


def is_valid_quadrilateral(quad: Optional[Quadrilateral], width: int, height: int) -> bool:
    if quad is None:
        return False
    area = shoelace_area(quad.as_list())
    total = width * height
    return total * MIN_AREA_RATIO < area < total * MAX_AREA_RATIO


def find_document_corners(contours: Iterable[Contour], width: int, height: int) -> Optional[Quadrilateral]:
    """Best contour reduced to four corners, or None when nothing qualifies."""
    contour = select_document_contour(contours, width, height)
    if contour is None:
        return None
    quad = extreme_corners(contour)
    if not is_valid_quadrilateral(quad, width, height):
        LOGGER.debug("Corner candidate %s failed area validation", quad)
        return None
    return quad
