"""Ready-to-use wrappers for individual scan steps.

Each module exposes `run(payload: dict)` which accepts:
{
    "image_path": "<path>",
    "params": {...},
    "output_dir": "<optional>"
}
and returns a JSON-friendly dict with step result metadata.
"""

from .binarize import run as run_binarize
from .corners import run as run_corners
from .edges import run as run_edges
from .enhance import run as run_enhance

__all__ = [
    "run_binarize",
    "run_corners",
    "run_edges",
    "run_enhance",
]
