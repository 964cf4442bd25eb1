"""Command-line entry point: scan one photo into a flattened document image."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import argparse
import json
import logging
import sys

from .config import AppConfig, ScanConfig, load_config, validate_config
from .imaging.buffers import ScanMode
from .imaging.codec import DecodeFailure, decode_image, save_image
from .pipeline import ScanPipeline, ScanResult
from .services import run_corners, run_edges

LOGGER = logging.getLogger(__name__)

EXIT_DECODE_FAILURE = 2


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    scan = config.scan
    config.scan = ScanConfig(
        mode=ScanMode.parse(args.mode) if args.mode else scan.mode,
        contrast=args.contrast if args.contrast is not None else scan.contrast,
        brightness=args.brightness if args.brightness is not None else scan.brightness,
    )
    if args.output is not None:
        config.output.path = args.output
    if args.debug_artifacts:
        config.output.debug_artifacts = True
    validate_config(config)
    return config


def _write_report(path: Path, source: Path, result: ScanResult, artifacts: List[dict]) -> None:
    payload = {"source": str(source), **result.to_payload()}
    if artifacts:
        payload["artifacts"] = artifacts
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    LOGGER.info("Report written to %s", path)


def run_scan(image_path: Path, config: AppConfig) -> Path:
    """Scan `image_path` with `config`; returns the written image path."""
    output_dir = config.output.path
    output_dir.mkdir(parents=True, exist_ok=True)

    buffer = decode_image(image_path)
    pipeline = ScanPipeline(config.detection)
    result = pipeline.run(
        buffer,
        config.scan.to_parameters(),
        progress=lambda event: LOGGER.info("%s", event.label),
    )
    for warning in result.warnings:
        LOGGER.warning("%s", warning)

    image_output = output_dir / f"{image_path.stem}_scan.jpg"
    save_image(result.image, image_output, quality=config.output.jpeg_quality)
    LOGGER.info("Scan written to %s (%s)", image_output, result.outcome.value)

    artifacts: List[dict] = []
    if config.output.debug_artifacts:
        debug_dir = output_dir / "debug"
        payload = {
            "image_path": str(image_path),
            "params": {"max_working_size": config.detection.max_working_size},
            "output_dir": str(debug_dir),
        }
        artifacts = [run_edges(payload), run_corners(payload)]

    if config.output.write_report:
        _write_report(output_dir / f"{image_path.stem}_scan.json", image_path, result, artifacts)
    return image_output


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Turn a photo of a paper document into a flattened scan")
    parser.add_argument("image", type=Path, help="Path to the photo (JPG/PNG)")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--mode", choices=[mode.value for mode in ScanMode], default=None, help="Scan mode")
    parser.add_argument("--contrast", type=float, default=None, help="Contrast factor in [1.0, 2.0]")
    parser.add_argument("--brightness", type=int, default=None, help="Brightness offset in [0, 50]")
    parser.add_argument("--output", type=Path, default=None, help="Output directory")
    parser.add_argument(
        "--debug-artifacts",
        action="store_true",
        help="Also write the edge map and corner overlay",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)
    if args.config is not None:
        LOGGER.info("Loading config from %s", args.config)
    try:
        config = _apply_overrides(load_config(args.config), args)
    except (TypeError, ValueError) as exc:
        parser.error(str(exc))

    try:
        run_scan(args.image, config)
    except DecodeFailure as exc:
        LOGGER.error("Cannot read %s: %s", args.image, exc)
        return EXIT_DECODE_FAILURE
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
