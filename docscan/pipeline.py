"""Scan orchestration: mode dispatch, detection, rectification and fallback."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import logging
import time

from docscan.config import DetectionConfig
from docscan.detection import tone
from docscan.detection.detector import STAGE_LABELS, Stage, detect_document
from docscan.detection.errors import StageFailure
from docscan.detection.rectify import rectify
from docscan.imaging.buffers import PipelineParameters, PixelBuffer, ScanMode

LOGGER = logging.getLogger(__name__)


class ScanOutcome(str, Enum):
    RECTIFIED = "rectified"
    FALLBACK = "fallback"
    ENHANCED = "enhanced"
    BINARIZED = "binarized"


SUMMARY_LABELS = {
    ScanOutcome.RECTIFIED: "Document scanned successfully (full CV pipeline)",
    ScanOutcome.FALLBACK: "Document edges not detected; enhancement fallback applied",
    ScanOutcome.ENHANCED: "Enhancement complete",
    ScanOutcome.BINARIZED: "Black & White conversion complete",
}


@dataclass(slots=True)
class StageEvent:
    stage: Stage
    label: str


ProgressCallback = Callable[[StageEvent], None]


@dataclass(slots=True)
class ScanResult:
    image: PixelBuffer
    outcome: ScanOutcome
    corners: Optional[List[Tuple[float, float]]] = None
    progress: List[StageEvent] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    failed_stage: Optional[str] = None
    elapsed_seconds: float = 0.0

    @property
    def labels(self) -> List[str]:
        return [event.label for event in self.progress]

    def to_payload(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "width": self.image.width,
            "height": self.image.height,
            "corners": [list(corner) for corner in self.corners] if self.corners else None,
            "progress": [{"stage": event.stage.value, "label": event.label} for event in self.progress],
            "warnings": self.warnings,
            "failed_stage": self.failed_stage,
            "elapsed_seconds": self.elapsed_seconds,
        }


class _ProgressLog:
    def __init__(self, callback: Optional[ProgressCallback]) -> None:
        self.events: List[StageEvent] = []
        self.current: Stage = Stage.IDLE
        self._callback = callback

    def enter(self, stage: Stage, label: Optional[str] = None) -> None:
        self.current = stage
        event = StageEvent(stage=stage, label=label or STAGE_LABELS.get(stage, stage.value))
        self.events.append(event)
        LOGGER.debug("Stage %s: %s", stage.value, event.label)
        if self._callback is not None:
            self._callback(event)


class ScanPipeline:
    """Turns one decoded photo into a scan; always returns an image."""

    def __init__(self, detection: Optional[DetectionConfig] = None) -> None:
        self.detection = detection or DetectionConfig()

    def run(
        self,
        buffer: PixelBuffer,
        params: Optional[PipelineParameters] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ScanResult:
        params = (params or PipelineParameters()).validate()
        LOGGER.info("Scanning %sx%s image in %s mode", buffer.width, buffer.height, params.mode.value)
        start = time.perf_counter()
        log = _ProgressLog(progress)
        log.enter(Stage.PREPROCESSING)

        if params.mode is ScanMode.BLACK_WHITE:
            log.enter(Stage.BLACK_WHITE)
            result = ScanResult(image=tone.binarize(buffer), outcome=ScanOutcome.BINARIZED)
        elif params.mode is ScanMode.ENHANCE:
            log.enter(Stage.ENHANCE)
            result = ScanResult(
                image=tone.enhance(buffer, params.contrast, params.brightness),
                outcome=ScanOutcome.ENHANCED,
            )
        else:
            result = self._run_auto(buffer, params, log)

        log.enter(Stage.DONE, SUMMARY_LABELS[result.outcome])
        result.progress = log.events
        result.elapsed_seconds = time.perf_counter() - start
        LOGGER.info(
            "Scan finished in %.2fs (outcome=%s, output=%sx%s)",
            result.elapsed_seconds,
            result.outcome.value,
            result.image.width,
            result.image.height,
        )
        return result

    def _run_auto(self, buffer: PixelBuffer, params: PipelineParameters, log: _ProgressLog) -> ScanResult:
        warnings: List[str] = []
        failed_stage: Optional[str] = None
        try:
            detection = detect_document(
                buffer,
                max_working_size=self.detection.max_working_size,
                on_stage=log.enter,
            )
            if detection.corners is not None:
                log.enter(Stage.RECTIFY)
                image, geometry = rectify(
                    buffer,
                    detection.corners,
                    detection.working_size,
                    params.contrast,
                    params.brightness,
                )
                return ScanResult(image=image, outcome=ScanOutcome.RECTIFIED, corners=geometry.corners)
            warnings.append("Document edges not detected")
            LOGGER.info("No valid document quadrilateral found; falling back to enhancement")
        except Exception as exc:  # any failure in detection degrades to enhancement
            failure = exc if isinstance(exc, StageFailure) else StageFailure(log.current.value, str(exc))
            failed_stage = failure.stage
            warnings.append(f"Error in CV pipeline: {failure}")
            LOGGER.warning("Stage %s failed, falling back to enhancement: %s", failed_stage, exc, exc_info=True)

        log.enter(Stage.FALLBACK_ENHANCE)
        return ScanResult(
            image=tone.enhance(buffer, params.contrast, params.brightness),
            outcome=ScanOutcome.FALLBACK,
            warnings=warnings,
            failed_stage=failed_stage,
        )


def scan(buffer: PixelBuffer, params: Optional[PipelineParameters] = None) -> ScanResult:
    return ScanPipeline().run(buffer, params)
