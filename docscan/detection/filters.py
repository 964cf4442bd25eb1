"""Intensity stages run on the working copy before edge detection."""
from __future__ import annotations

import logging

import numpy as np

from docscan.imaging.buffers import PixelBuffer, ScalarField

LOGGER = logging.getLogger(__name__)

LUMA_WEIGHTS = (0.299, 0.587, 0.114)
STRETCH_LOW_PERCENTILE = 0.02
STRETCH_HIGH_PERCENTILE = 0.98
BLUR_KERNEL = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.int64)
BLUR_DIVISOR = 16


def to_byte_levels(values: np.ndarray) -> np.ndarray:
    """Store float levels the way a clamped byte array does (round half to even)."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def luminance(buffer: PixelBuffer) -> np.ndarray:
    """Unrounded ITU-R 601 luma as float64."""
    if buffer.channels == 1:
        return buffer.samples[:, :, 0].astype(np.float64)
    samples = buffer.samples.astype(np.float64)
    r_weight, g_weight, b_weight = LUMA_WEIGHTS
    return r_weight * samples[:, :, 0] + g_weight * samples[:, :, 1] + b_weight * samples[:, :, 2]


def to_grayscale(buffer: PixelBuffer) -> ScalarField:
    return ScalarField(to_byte_levels(luminance(buffer)))


def stretch_contrast(field: ScalarField) -> ScalarField:
    """Linear remap between the 2nd and 98th histogram percentiles."""
    levels = field.values if field.is_integer else to_byte_levels(field.values)
    histogram = np.bincount(levels.ravel(), minlength=256)
    cumulative = np.cumsum(histogram)
    total = int(cumulative[-1])
    low_cut = total * STRETCH_LOW_PERCENTILE
    high_cut = total * STRETCH_HIGH_PERCENTILE

    min_val = int(np.argmax(cumulative > low_cut))
    max_val = int(np.argmax(cumulative > high_cut))
    value_range = max_val - min_val
    if value_range <= 0:
        LOGGER.debug("Flat histogram (min=%s max=%s); contrast left unchanged", min_val, max_val)
        return ScalarField(levels.copy())

    LOGGER.debug("Stretching contrast from [%s, %s]", min_val, max_val)
    stretched = (levels.astype(np.float64) - min_val) / value_range * 255
    return ScalarField(to_byte_levels(stretched))


def blur(field: ScalarField) -> ScalarField:
    """3x3 binomial blur over interior pixels; the one-pixel border stays 0."""
    source = field.values.astype(np.float64)
    height, width = source.shape
    result = np.zeros((height, width), dtype=np.uint8)
    if width < 3 or height < 3:
        return ScalarField(result)

    total = np.zeros((height - 2, width - 2), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            total += BLUR_KERNEL[ky, kx] * source[ky:ky + height - 2, kx:kx + width - 2]
    result[1:-1, 1:-1] = to_byte_levels(total / BLUR_DIVISOR)
    return ScalarField(result)
