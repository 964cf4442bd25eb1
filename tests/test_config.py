from pathlib import Path

import pytest

from docscan.config import AppConfig, load_config, validate_config
from docscan.imaging.buffers import ScanMode


def test_missing_path_yields_defaults():
    config = load_config(None)

    assert config.scan.mode is ScanMode.AUTO
    assert config.scan.contrast == 1.4
    assert config.scan.brightness == 15
    assert config.detection.max_working_size == 800
    assert config.output.path == Path("output")
    assert config.output.jpeg_quality == 95


def test_yaml_sections_override_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "scan:\n"
        "  mode: bw\n"
        "  contrast: 1.8\n"
        "detection:\n"
        "  max_working_size: 640\n"
        "output:\n"
        "  path: scans\n"
        "  debug_artifacts: true\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.scan.mode is ScanMode.BLACK_WHITE
    assert config.scan.contrast == 1.8
    assert config.scan.brightness == 15
    assert config.detection.max_working_size == 640
    assert config.output.path == Path("scans")
    assert config.output.debug_artifacts is True


def test_mode_aliases_are_accepted(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("scan:\n  mode: black_white\n", encoding="utf-8")

    assert load_config(path).scan.mode is ScanMode.BLACK_WHITE


def test_empty_file_yields_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == AppConfig()


def test_non_mapping_section_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("scan:\n  - auto\n", encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(path)


def test_out_of_range_contrast_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("scan:\n  contrast: 2.5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_jpeg_quality_is_bounded():
    config = AppConfig()
    config.output.jpeg_quality = 0

    with pytest.raises(ValueError):
        validate_config(config)
