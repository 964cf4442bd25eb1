"""Buffer and geometry types shared by every scan stage."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Tuple

import numpy as np

VALID_CHANNELS = (1, 3, 4)


@dataclass(slots=True)
class PixelBuffer:
    """Decoded image samples shaped (height, width, channels), uint8, RGB(A) order."""

    samples: np.ndarray

    def __post_init__(self) -> None:
        if not isinstance(self.samples, np.ndarray):
            raise ValueError("samples must be a numpy array")
        if self.samples.dtype != np.uint8:
            raise ValueError(f"samples must be uint8, got {self.samples.dtype}")
        if self.samples.ndim != 3 or self.samples.shape[2] not in VALID_CHANNELS:
            raise ValueError(f"samples must be shaped (height, width, 1|3|4), got {self.samples.shape}")
        if self.samples.shape[0] < 1 or self.samples.shape[1] < 1:
            raise ValueError("buffer must be at least 1x1")

    @property
    def width(self) -> int:
        return int(self.samples.shape[1])

    @property
    def height(self) -> int:
        return int(self.samples.shape[0])

    @property
    def channels(self) -> int:
        return int(self.samples.shape[2])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.samples.copy())

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Wrap a (h, w) or (h, w, c) uint8 array, copying it."""
        if array.ndim == 2:
            array = array[:, :, np.newaxis]
        return cls(np.ascontiguousarray(array, dtype=np.uint8).copy())


@dataclass(slots=True)
class ScalarField:
    """Single-channel field; either uint8 levels or float64 measurements."""

    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 2:
            raise ValueError(f"field must be 2-D, got shape {self.values.shape}")
        if self.values.dtype not in (np.uint8, np.float64):
            raise ValueError(f"field dtype must be uint8 or float64, got {self.values.dtype}")

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def is_integer(self) -> bool:
        return self.values.dtype == np.uint8

    def copy(self) -> "ScalarField":
        return ScalarField(self.values.copy())


@dataclass(slots=True)
class GradientField:
    magnitude: ScalarField
    direction: ScalarField
    max_magnitude: float = 0.0


class Point(NamedTuple):
    x: int
    y: int


@dataclass(slots=True)
class Contour:
    """Connected edge pixels in the order the flood fill visited them."""

    points: List[Point] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.points)

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        xs = np.fromiter((p.x for p in self.points), dtype=np.int64, count=len(self.points))
        ys = np.fromiter((p.y for p in self.points), dtype=np.int64, count=len(self.points))
        return xs, ys


@dataclass(slots=True)
class Quadrilateral:
    """Corner assignment; not guaranteed convex or rectangular."""

    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    def as_list(self) -> List[Point]:
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]


class ScanMode(str, Enum):
    AUTO = "auto"
    ENHANCE = "enhance"
    BLACK_WHITE = "bw"

    @classmethod
    def parse(cls, value: "str | ScanMode") -> "ScanMode":
        if isinstance(value, ScanMode):
            return value
        lowered = str(value).strip().lower()
        aliases = {"blackwhite": "bw", "black_white": "bw", "black-white": "bw"}
        lowered = aliases.get(lowered, lowered)
        try:
            return cls(lowered)
        except ValueError as exc:
            raise ValueError(f"Unknown scan mode: {value!r}") from exc


CONTRAST_RANGE = (1.0, 2.0)
BRIGHTNESS_RANGE = (0, 50)


@dataclass(slots=True)
class PipelineParameters:
    mode: ScanMode = ScanMode.AUTO
    contrast: float = 1.4
    brightness: int = 15

    def validate(self) -> "PipelineParameters":
        low, high = CONTRAST_RANGE
        if not low <= self.contrast <= high:
            raise ValueError(f"contrast must be within [{low}, {high}], got {self.contrast}")
        low_b, high_b = BRIGHTNESS_RANGE
        if not low_b <= self.brightness <= high_b:
            raise ValueError(f"brightness must be within [{low_b}, {high_b}], got {self.brightness}")
        return self
