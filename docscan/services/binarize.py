"""Standalone black & white step."""
from __future__ import annotations

from pathlib import Path
from typing import Dict
import logging
import time

from docscan.detection import binarize
from docscan.imaging.codec import decode_image, save_image

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path_raw = payload.get("image_path")
    if not image_path_raw:
        raise ValueError("payload must include 'image_path'")
    params = payload.get("params") or {}
    output_dir = Path(payload.get("output_dir") or Path(str(image_path_raw)).parent)
    threshold = int(params.get("threshold", 128))

    image_path = Path(str(image_path_raw))
    output_dir.mkdir(parents=True, exist_ok=True)

    image = decode_image(image_path)
    start = time.perf_counter()
    result = binarize(image, threshold=threshold)
    elapsed = time.perf_counter() - start

    output_path = output_dir / f"{image_path.stem}__binarize.png"
    save_image(result, output_path)

    LOGGER.info("binarize threshold=%s elapsed=%.2fs output=%s", threshold, elapsed, output_path)
    return {
        "step": "binarize",
        "threshold": threshold,
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
