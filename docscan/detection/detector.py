"""Runs the detection stages on a downscaled working copy."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import logging

import cv2
import numpy as np

from docscan.imaging.buffers import Contour, PixelBuffer, Quadrilateral, ScalarField

from . import contours as contour_stage
from . import edges as edge_stage
from . import filters, geometry

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKING_SIZE = 800


class Stage(str, Enum):
    IDLE = "idle"
    PREPROCESSING = "preprocessing"
    GRAYSCALE = "grayscale"
    CONTRAST_STRETCH = "contrast_stretch"
    BLUR = "blur"
    EDGE_DETECT = "edge_detect"
    CONTOUR_TRACE = "contour_trace"
    QUAD_EXTRACT = "quad_extract"
    RECTIFY = "rectify"
    FALLBACK_ENHANCE = "fallback_enhance"
    ENHANCE = "enhance"
    BLACK_WHITE = "black_white"
    DONE = "done"


STAGE_LABELS = {
    Stage.PREPROCESSING: "Preprocessing",
    Stage.GRAYSCALE: "Grayscale conversion (weighted RGB)",
    Stage.CONTRAST_STRETCH: "Contrast enhancement (histogram stretching)",
    Stage.BLUR: "Gaussian blur (noise reduction)",
    Stage.EDGE_DETECT: "Canny edge detection",
    Stage.CONTOUR_TRACE: "Contour detection",
    Stage.QUAD_EXTRACT: "Corner extraction",
    Stage.RECTIFY: "Perspective transform",
    Stage.FALLBACK_ENHANCE: "Document edges not detected; applying enhancement fallback",
    Stage.ENHANCE: "Applying enhancement",
    Stage.BLACK_WHITE: "Converting to black & white",
}

StageCallback = Callable[[Stage], None]


@dataclass(slots=True)
class DetectionResult:
    working: PixelBuffer
    edges: Optional[ScalarField] = None
    contours: List[Contour] = field(default_factory=list)
    corners: Optional[Quadrilateral] = None

    @property
    def working_size(self) -> Tuple[int, int]:
        return self.working.size


def working_size_for(width: int, height: int, max_size: int) -> Tuple[int, int]:
    if width <= max_size and height <= max_size:
        return width, height
    ratio = min(max_size / width, max_size / height)
    # round half up like Math.round
    return max(1, int(width * ratio + 0.5)), max(1, int(height * ratio + 0.5))


def make_working_copy(buffer: PixelBuffer, max_size: int = DEFAULT_MAX_WORKING_SIZE) -> PixelBuffer:
    target = working_size_for(buffer.width, buffer.height, max_size)
    if target == buffer.size:
        return buffer.copy()
    LOGGER.debug("Downscaling working copy %s -> %s", buffer.size, target)
    resized = cv2.resize(buffer.samples, target, interpolation=cv2.INTER_AREA)
    return PixelBuffer.from_array(np.asarray(resized))


def _notify(callback: Optional[StageCallback], stage: Stage) -> None:
    if callback is not None:
        callback(stage)


def detect_document(
    buffer: PixelBuffer,
    max_working_size: int = DEFAULT_MAX_WORKING_SIZE,
    on_stage: Optional[StageCallback] = None,
) -> DetectionResult:
    """Grayscale -> stretch -> blur -> edges -> contours -> corners on a working copy.

    `on_stage` is called before each stage starts, so a caller catching an
    exception knows which stage raised it.
    """
    working = make_working_copy(buffer, max_working_size)
    result = DetectionResult(working=working)

    _notify(on_stage, Stage.GRAYSCALE)
    gray = filters.to_grayscale(working)

    _notify(on_stage, Stage.CONTRAST_STRETCH)
    stretched = filters.stretch_contrast(gray)

    _notify(on_stage, Stage.BLUR)
    blurred = filters.blur(stretched)

    _notify(on_stage, Stage.EDGE_DETECT)
    result.edges = edge_stage.detect_edges(blurred)

    _notify(on_stage, Stage.CONTOUR_TRACE)
    result.contours = contour_stage.trace_contours(result.edges)

    _notify(on_stage, Stage.QUAD_EXTRACT)
    result.corners = geometry.find_document_corners(result.contours, working.width, working.height)
    return result
