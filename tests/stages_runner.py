"""Utility runner to try every scan step independently on the same image."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from docscan.services import run_binarize, run_corners, run_edges, run_enhance


def run_all_steps(image_path: Path, output_dir: Path, max_working_size: int) -> None:
    steps: List[Tuple[str, Callable[[Dict[str, object]], Dict[str, object]], Dict[str, object]]] = [
        ("edges", run_edges, {"max_working_size": max_working_size}),
        ("corners", run_corners, {"max_working_size": max_working_size, "thickness": 3}),
        ("enhance", run_enhance, {"contrast": 1.4, "brightness": 15}),
        ("binarize", run_binarize, {"threshold": 128}),
    ]

    output_dir.mkdir(parents=True, exist_ok=True)
    for name, fn, params in steps:
        res = fn(
            {
                "image_path": str(image_path),
                "params": params,
                "output_dir": str(output_dir),
            }
        )
        print(name, res)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all scan steps independently on one image.")
    parser.add_argument("--image", type=Path, default=Path("input/x.jpg"), help="Path to input image")
    parser.add_argument("--output", type=Path, default=Path("output/check_steps_single"), help="Output directory")
    parser.add_argument("--max-working-size", type=int, default=800, help="Longest side of the working copy")
    args = parser.parse_args()

    run_all_steps(args.image, args.output, args.max_working_size)


if __name__ == "__main__":  # pragma: no cover
    main()
