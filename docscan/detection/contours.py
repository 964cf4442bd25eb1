"""Connected-region extraction over a binary edge map."""
from __future__ import annotations

from typing import List

import logging

import numpy as np

from docscan.imaging.buffers import Contour, Point, ScalarField

LOGGER = logging.getLogger(__name__)

EDGE_VALUE = 255
MAX_CONTOUR_POINTS = 5000
MIN_CONTOUR_POINTS = 50

# push order of the flood fill; the stack pops the last one first
NEIGHBOUR_OFFSETS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)]


def _fill_region(
    is_edge: bytes,
    visited: bytearray,
    width: int,
    height: int,
    start_x: int,
    start_y: int,
    limit: int,
) -> List[Point]:
    points: List[Point] = []
    stack = [(start_x, start_y)]
    while stack and len(points) < limit:
        x, y = stack.pop()
        index = y * width + x
        if visited[index]:
            continue
        visited[index] = 1
        points.append(Point(x, y))
        for dx, dy in NEIGHBOUR_OFFSETS:
            nx = x + dx
            ny = y + dy
            if 0 <= nx < width and 0 <= ny < height:
                neighbour = ny * width + nx
                if is_edge[neighbour] and not visited[neighbour]:
                    stack.append((nx, ny))
    return points


def trace_contours(
    edges: ScalarField,
    max_points: int = MAX_CONTOUR_POINTS,
    min_points: int = MIN_CONTOUR_POINTS,
) -> List[Contour]:
    """Depth-first flood fill from each unvisited edge pixel in row-major order.

    A region stops growing at `max_points`; pixels it did not reach can seed
    later regions. No pixel belongs to two contours.
    """
    height, width = edges.values.shape
    edge_mask = edges.values == EDGE_VALUE
    is_edge = edge_mask.ravel().astype(np.uint8).tobytes()
    visited = bytearray(width * height)

    contours: List[Contour] = []
    discarded = 0
    for index in np.flatnonzero(edge_mask).tolist():
        if visited[index]:
            continue
        y, x = divmod(index, width)
        points = _fill_region(is_edge, visited, width, height, x, y, max_points)
        if len(points) < min_points:
            discarded += 1
            continue
        contours.append(Contour(points))

    LOGGER.debug("Traced %d contours (%d discarded as noise)", len(contours), discarded)
    return contours
