"""Configuration helpers for the document scanner."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import logging

import yaml

from docscan.imaging.buffers import PipelineParameters, ScanMode

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanConfig:
    mode: ScanMode = ScanMode.AUTO
    contrast: float = 1.4
    brightness: int = 15

    def to_parameters(self) -> PipelineParameters:
        return PipelineParameters(
            mode=self.mode,
            contrast=self.contrast,
            brightness=self.brightness,
        ).validate()


@dataclass(slots=True)
class DetectionConfig:
    max_working_size: int = 800


@dataclass(slots=True)
class OutputConfig:
    path: Path = Path("output")
    jpeg_quality: int = 95
    write_report: bool = True
    debug_artifacts: bool = False


@dataclass(slots=True)
class AppConfig:
    scan: ScanConfig = field(default_factory=ScanConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"Section '{key}' must be a mapping")
    return value


def load_config(path: Optional[Path]) -> AppConfig:
    """Load configuration from a YAML file; a missing path yields defaults."""
    if path is None:
        return AppConfig()
    raw_config = _load_yaml_file(path)

    scan_cfg = _section(raw_config, "scan")
    detection_cfg = _section(raw_config, "detection")
    output_cfg = _section(raw_config, "output")

    config = AppConfig(
        scan=ScanConfig(
            mode=ScanMode.parse(scan_cfg.get("mode", ScanMode.AUTO.value)),
            contrast=float(scan_cfg.get("contrast", 1.4)),
            brightness=int(scan_cfg.get("brightness", 15)),
        ),
        detection=DetectionConfig(
            max_working_size=int(detection_cfg.get("max_working_size", 800)),
        ),
        output=OutputConfig(
            path=Path(output_cfg.get("path", "output")),
            jpeg_quality=int(output_cfg.get("jpeg_quality", 95)),
            write_report=bool(output_cfg.get("write_report", True)),
            debug_artifacts=bool(output_cfg.get("debug_artifacts", False)),
        ),
    )
    validate_config(config)

    LOGGER.debug("Loaded configuration: %s", config)
    return config


def validate_config(config: AppConfig) -> None:
    config.scan.to_parameters()
    if config.detection.max_working_size < 16:
        raise ValueError("detection.max_working_size must be at least 16")
    if not 1 <= config.output.jpeg_quality <= 100:
        raise ValueError("output.jpeg_quality must be within [1, 100]")


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    LOGGER.debug("Using PyYAML to parse %s", path)
    loaded = yaml.safe_load(text) or {}
    if not isinstance(loaded, dict):
        raise TypeError(f"Config file {path} must contain a mapping")
    return loaded
