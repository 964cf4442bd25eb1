"""Pixel buffers and their codec."""

from .buffers import (
    Contour,
    GradientField,
    PipelineParameters,
    PixelBuffer,
    Point,
    Quadrilateral,
    ScalarField,
    ScanMode,
)
from .codec import DecodeFailure, decode_image, encode_jpeg, save_image

__all__ = [
    "Contour",
    "DecodeFailure",
    "GradientField",
    "PipelineParameters",
    "PixelBuffer",
    "Point",
    "Quadrilateral",
    "ScalarField",
    "ScanMode",
    "decode_image",
    "encode_jpeg",
    "save_image",
]
