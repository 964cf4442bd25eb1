"""Standalone corner-detection step: draws the detected quadrilateral over the photo."""
from __future__ import annotations

from pathlib import Path
from typing import Dict
import logging
import time

import cv2
import numpy as np

from docscan.detection import detect_document
from docscan.detection.rectify import plan_geometry
from docscan.imaging.buffers import PixelBuffer
from docscan.imaging.codec import decode_image, save_image

LOGGER = logging.getLogger(__name__)

OVERLAY_COLOR = (255, 0, 0, 255)


def run(payload: Dict[str, object]) -> Dict[str, object]:
    image_path_raw = payload.get("image_path")
    if not image_path_raw:
        raise ValueError("payload must include 'image_path'")
    params = payload.get("params") or {}
    output_dir = Path(payload.get("output_dir") or Path(str(image_path_raw)).parent)
    max_working_size = int(params.get("max_working_size", 800))
    thickness = int(params.get("thickness", 3))

    image_path = Path(str(image_path_raw))
    output_dir.mkdir(parents=True, exist_ok=True)

    image = decode_image(image_path)
    start = time.perf_counter()
    detection = detect_document(image, max_working_size=max_working_size)
    elapsed = time.perf_counter() - start

    corners = None
    overlay = image.samples.copy()
    if detection.corners is not None:
        geometry = plan_geometry(detection.corners, detection.working_size, image.size)
        corners = [[round(x, 2), round(y, 2)] for x, y in geometry.corners]
        polygon = np.array([[int(round(x)), int(round(y))] for x, y in geometry.corners], dtype=np.int32)
        color = OVERLAY_COLOR[: image.channels] if image.channels > 1 else (255,)
        cv2.polylines(overlay, [polygon.reshape(-1, 1, 2)], True, color, thickness)

    output_path = output_dir / f"{image_path.stem}__corners.png"
    save_image(PixelBuffer.from_array(overlay), output_path)

    LOGGER.info(
        "corners found=%s contours=%s elapsed=%.2fs output=%s",
        corners is not None,
        len(detection.contours),
        elapsed,
        output_path,
    )
    return {
        "step": "corners",
        "found": corners is not None,
        "corners": corners,
        "contours": len(detection.contours),
        "elapsed_seconds": elapsed,
        "output_path": str(output_path),
    }
