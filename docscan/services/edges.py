"""Standalone edge-map step: writes the working-resolution edge map as PNG."""
from __future__ import annotations

from pathlib import Path
from typing import Dict
import logging
import time

import numpy as np

from docscan.detection import blur, detect_edges, make_working_copy, stretch_contrast, to_grayscale
from docscan.imaging.buffers import PixelBuffer
from docscan.imaging.codec import decode_image, save_image

LOGGER = logging.getLogger(__name__)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path_raw = payload.get("image_path")
    if not image_path_raw:
        raise ValueError("payload must include 'image_path'")
    params = payload.get("params") or {}
    output_dir = Path(payload.get("output_dir") or Path(str(image_path_raw)).parent)
    max_working_size = int(params.get("max_working_size", 800))

    image_path = Path(str(image_path_raw))
    output_dir.mkdir(parents=True, exist_ok=True)

    image = decode_image(image_path)
    start = time.perf_counter()
    working = make_working_copy(image, max_working_size)
    edges = detect_edges(blur(stretch_contrast(to_grayscale(working))))
    elapsed = time.perf_counter() - start

    output_path = output_dir / f"{image_path.stem}__edges.png"
    save_image(PixelBuffer.from_array(edges.values), output_path)
    edge_pixels = int(np.count_nonzero(edges.values))

    LOGGER.info("edges pixels=%s elapsed=%.2fs output=%s", edge_pixels, elapsed, output_path)
    return {
        "step": "edges",
        "edge_pixels": edge_pixels,
        "working_size": [working.width, working.height],
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
