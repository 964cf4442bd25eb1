"""Single-pass pixel remaps: linear enhancement and fixed-threshold binarization."""
from __future__ import annotations

import logging

import numpy as np

from docscan.imaging.buffers import PixelBuffer

from .filters import luminance, to_byte_levels

LOGGER = logging.getLogger(__name__)

BINARY_THRESHOLD = 128


def _color_channels(buffer: PixelBuffer) -> int:
    return min(buffer.channels, 3)


def enhance(buffer: PixelBuffer, contrast: float, brightness: float) -> PixelBuffer:
    """clamp(contrast * value + brightness) on the colour channels; alpha is kept."""
    result = buffer.copy()
    colors = _color_channels(buffer)
    remapped = contrast * buffer.samples[:, :, :colors].astype(np.float64) + brightness
    result.samples[:, :, :colors] = to_byte_levels(remapped)
    return result


def binarize(buffer: PixelBuffer, threshold: int = BINARY_THRESHOLD) -> PixelBuffer:
    """Unrounded luma strictly above the threshold becomes white, everything else black."""
    gray = luminance(buffer)
    level = np.where(gray > threshold, 255, 0).astype(np.uint8)
    result = buffer.copy()
    colors = _color_channels(buffer)
    result.samples[:, :, :colors] = level[:, :, np.newaxis]
    LOGGER.debug("Binarized %sx%s buffer at threshold %s", buffer.width, buffer.height, threshold)
    return result
