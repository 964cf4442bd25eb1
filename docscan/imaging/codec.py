"""Pillow-backed decode/encode for pixel buffers."""
from __future__ import annotations

from pathlib import Path
from typing import Union

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from .buffers import PixelBuffer

LOGGER = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 95


class DecodeFailure(ValueError):
    """Raised when input bytes or files cannot be read as an image."""


def decode_image(source: Union[bytes, bytearray, str, Path]) -> PixelBuffer:
    """Decode raw bytes or an image file into an RGBA buffer."""
    try:
        if isinstance(source, (bytes, bytearray)):
            handle = Image.open(io.BytesIO(bytes(source)))
        else:
            handle = Image.open(Path(source))
        with handle as image:
            image.load()
            rgba = image.convert("RGBA")
    except FileNotFoundError as exc:
        raise DecodeFailure(f"Image not found: {source}") from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeFailure(f"Cannot decode image: {exc}") from exc
    buffer = from_pil(rgba)
    LOGGER.debug("Decoded image %sx%s", buffer.width, buffer.height)
    return buffer


def from_pil(image: Image.Image) -> PixelBuffer:
    if image.mode not in ("L", "RGB", "RGBA"):
        image = image.convert("RGBA")
    return PixelBuffer.from_array(np.asarray(image, dtype=np.uint8))


def to_pil(buffer: PixelBuffer) -> Image.Image:
    samples = buffer.samples[:, :, 0] if buffer.channels == 1 else buffer.samples
    return Image.fromarray(np.ascontiguousarray(samples))


def encode_jpeg(buffer: PixelBuffer, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    image = to_pil(buffer)
    if image.mode == "RGBA":
        image = image.convert("RGB")
    out = io.BytesIO()
    image.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def save_image(buffer: PixelBuffer, path: Path, quality: int = DEFAULT_JPEG_QUALITY) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix in {".jpg", ".jpeg"}:
        path.write_bytes(encode_jpeg(buffer, quality=quality))
    else:
        to_pil(buffer).save(path)
    LOGGER.debug("Wrote %s", path)
    return path
