"""Standalone linear enhancement step."""
from __future__ import annotations

from pathlib import Path
from typing import Dict
import logging
import time

from docscan.detection import enhance
from docscan.imaging.buffers import PipelineParameters
from docscan.imaging.codec import decode_image, save_image

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path_raw = payload.get("image_path")
    if not image_path_raw:
        raise ValueError("payload must include 'image_path'")
    params = payload.get("params") or {}
    output_dir = Path(payload.get("output_dir") or Path(str(image_path_raw)).parent)
    settings = PipelineParameters(
        contrast=float(params.get("contrast", 1.4)),
        brightness=int(params.get("brightness", 15)),
    ).validate()

    image_path = Path(str(image_path_raw))
    output_dir.mkdir(parents=True, exist_ok=True)

    image = decode_image(image_path)
    start = time.perf_counter()
    enhanced = enhance(image, settings.contrast, settings.brightness)
    elapsed = time.perf_counter() - start

    output_path = output_dir / f"{image_path.stem}__enhance.jpg"
    save_image(enhanced, output_path)

    LOGGER.info(
        "enhance contrast=%s brightness=%s elapsed=%.2fs output=%s",
        settings.contrast,
        settings.brightness,
        elapsed,
        output_path,
    )
    return {
        "step": "enhance",
        "contrast": settings.contrast,
        "brightness": settings.brightness,
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
