"""Document detection and image remapping stages."""

from .contours import trace_contours
from .detector import DetectionResult, Stage, STAGE_LABELS, detect_document, make_working_copy
from .edges import detect_edges
from .errors import StageFailure
from .filters import blur, stretch_contrast, to_grayscale
from .geometry import find_document_corners, is_valid_quadrilateral, shoelace_area
from .rectify import rectify
from .tone import binarize, enhance

__all__ = [
    "DetectionResult",
    "STAGE_LABELS",
    "Stage",
    "StageFailure",
    "binarize",
    "blur",
    "detect_document",
    "detect_edges",
    "enhance",
    "find_document_corners",
    "is_valid_quadrilateral",
    "make_working_copy",
    "rectify",
    "shoelace_area",
    "stretch_contrast",
    "to_grayscale",
    "trace_contours",
]
