"""Photo-to-scan document pipeline."""

from .config import AppConfig, load_config
from .imaging import DecodeFailure, PipelineParameters, PixelBuffer, ScanMode, decode_image, encode_jpeg
from .pipeline import ScanOutcome, ScanPipeline, ScanResult, StageEvent, scan
from .worker import ScanWorker

__all__ = [
    "AppConfig",
    "DecodeFailure",
    "PipelineParameters",
    "PixelBuffer",
    "ScanMode",
    "ScanOutcome",
    "ScanPipeline",
    "ScanResult",
    "ScanWorker",
    "StageEvent",
    "decode_image",
    "encode_jpeg",
    "load_config",
    "scan",
]
