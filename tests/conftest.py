"""Synthetic photos shared by the test modules."""
from __future__ import annotations

import numpy as np
import pytest

from docscan.imaging.buffers import PixelBuffer

BACKGROUND = 20
BORDER = 125
PAPER = 230


def document_array(
    width: int = 800,
    height: int = 600,
    left: int = 200,
    top: int = 150,
    right: int = 600,
    bottom: int = 450,
    background: int = BACKGROUND,
    border: int = BORDER,
    paper: int = PAPER,
) -> np.ndarray:
    """Bright sheet on a dark table with a one-pixel anti-aliased outline.

    The sheet covers columns [left, right) and rows [top, bottom); the outline
    sits just outside it, so the outline rectangle spans (left-1, top-1) to
    (right, bottom).
    """
    levels = np.full((height, width), background, dtype=np.uint8)
    levels[top - 1:bottom + 1, left - 1:right + 1] = border
    levels[top:bottom, left:right] = paper
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, :3] = levels[:, :, np.newaxis]
    rgba[:, :, 3] = 255
    return rgba


def uniform_array(width: int, height: int, value: int) -> np.ndarray:
    rgba = np.full((height, width, 4), value, dtype=np.uint8)
    rgba[:, :, 3] = 255
    return rgba


@pytest.fixture
def document_photo() -> PixelBuffer:
    return PixelBuffer(document_array())


@pytest.fixture
def large_document_photo() -> PixelBuffer:
    """The 800x600 sheet upsampled 2x, so the working copy reproduces it exactly."""
    small = document_array()
    return PixelBuffer(np.repeat(np.repeat(small, 2, axis=0), 2, axis=1))


@pytest.fixture
def blank_photo() -> PixelBuffer:
    return PixelBuffer(uniform_array(800, 600, 128))
