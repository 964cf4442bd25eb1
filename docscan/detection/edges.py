"""Canny-style edge detection: Sobel gradient, suppression, double threshold, hysteresis.

All passes skip the one-pixel image border, which therefore never carries an
edge. Magnitude and direction are kept as float64 fields; the threshold and
hysteresis passes produce uint8 maps.
"""
from __future__ import annotations

import logging

import numpy as np

from docscan.imaging.buffers import GradientField, ScalarField

LOGGER = logging.getLogger(__name__)

SOBEL_X = np.array([-1, 0, 1, -2, 0, 2, -1, 0, 1], dtype=np.float64).reshape(3, 3)
SOBEL_Y = np.array([-1, -2, -1, 0, 0, 0, 1, 2, 1], dtype=np.float64).reshape(3, 3)

HIGH_THRESHOLD_RATIO = 0.15
LOW_THRESHOLD_RATIO = 0.4

STRONG = 255
WEAK = 128


def _interior_window(values: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """View of `values` shifted by (dx, dy) and aligned with the interior."""
    height, width = values.shape
    return values[1 + dy:height - 1 + dy, 1 + dx:width - 1 + dx]


def sobel_gradient(field: ScalarField) -> GradientField:
    source = field.values.astype(np.float64)
    height, width = source.shape
    magnitude = np.zeros((height, width), dtype=np.float64)
    direction = np.zeros((height, width), dtype=np.float64)
    if width < 3 or height < 3:
        return GradientField(ScalarField(magnitude), ScalarField(direction), 0.0)

    gx = np.zeros((height - 2, width - 2), dtype=np.float64)
    gy = np.zeros((height - 2, width - 2), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            window = _interior_window(source, kx - 1, ky - 1)
            if SOBEL_X[ky, kx]:
                gx += SOBEL_X[ky, kx] * window
            if SOBEL_Y[ky, kx]:
                gy += SOBEL_Y[ky, kx] * window

    magnitude[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy)
    direction[1:-1, 1:-1] = np.arctan2(gy, gx)
    max_magnitude = float(magnitude.max())
    return GradientField(ScalarField(magnitude), ScalarField(direction), max_magnitude)


def suppress_non_maxima(gradient: GradientField) -> ScalarField:
    """Keep magnitudes that are >= both neighbours across their orientation band."""
    magnitude = gradient.magnitude.values
    height, width = magnitude.shape
    suppressed = np.zeros((height, width), dtype=np.float64)
    if width < 3 or height < 3:
        return ScalarField(suppressed)

    angle = np.degrees(gradient.direction.values[1:-1, 1:-1])
    angle = np.mod(angle, 180.0)
    centre = magnitude[1:-1, 1:-1]

    horizontal = (angle < 22.5) | (angle >= 157.5)
    diagonal_up = (angle >= 22.5) & (angle < 67.5)
    vertical = (angle >= 67.5) & (angle < 112.5)
    # everything else is the 112.5-157.5 band

    first = np.select(
        [horizontal, diagonal_up, vertical],
        [
            _interior_window(magnitude, 1, 0),
            _interior_window(magnitude, -1, 1),
            _interior_window(magnitude, 0, 1),
        ],
        default=_interior_window(magnitude, 1, 1),
    )
    second = np.select(
        [horizontal, diagonal_up, vertical],
        [
            _interior_window(magnitude, -1, 0),
            _interior_window(magnitude, 1, -1),
            _interior_window(magnitude, 0, -1),
        ],
        default=_interior_window(magnitude, -1, -1),
    )
    keep = (centre >= first) & (centre >= second)
    suppressed[1:-1, 1:-1] = np.where(keep, centre, 0.0)
    return ScalarField(suppressed)


def apply_double_threshold(suppressed: ScalarField, max_magnitude: float) -> ScalarField:
    values = suppressed.values
    edges = np.zeros(values.shape, dtype=np.uint8)
    if max_magnitude <= 0:
        LOGGER.debug("Gradient is flat; no edge candidates")
        return ScalarField(edges)

    high = max_magnitude * HIGH_THRESHOLD_RATIO
    low = high * LOW_THRESHOLD_RATIO
    edges[values >= low] = WEAK
    edges[values >= high] = STRONG
    LOGGER.debug("Edge thresholds high=%.2f low=%.2f", high, low)
    return ScalarField(edges)


def apply_hysteresis(classified: ScalarField) -> ScalarField:
    """Single pass: a weak pixel survives only next to an originally strong one."""
    values = classified.values
    height, width = values.shape
    strong = values == STRONG
    weak = values == WEAK

    padded = np.pad(strong, 1, mode="constant", constant_values=False)
    near_strong = np.zeros((height, width), dtype=bool)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            near_strong |= padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]

    edges = np.zeros((height, width), dtype=np.uint8)
    edges[strong | (weak & near_strong)] = STRONG
    return ScalarField(edges)


def detect_edges(field: ScalarField) -> ScalarField:
    gradient = sobel_gradient(field)
    suppressed = suppress_non_maxima(gradient)
    classified = apply_double_threshold(suppressed, gradient.max_magnitude)
    edges = apply_hysteresis(classified)
    LOGGER.debug(
        "Edge map: %d strong pixels (max magnitude %.2f)",
        int(np.count_nonzero(edges.values)),
        gradient.max_magnitude,
    )
    return edges
