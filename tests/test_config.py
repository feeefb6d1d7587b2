from __future__ import annotations

from pathlib import Path

import pytest

from docscan.config import AppConfig, load_config

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")
    assert config == AppConfig()
    assert config.engine.large_image_pixels == 1500 * 1500
    assert config.worker.backend == "process"


def test_repository_config_matches_defaults():
    config = load_config(REPO_ROOT / "config.yaml")
    assert config.engine == AppConfig().engine
    assert config.io.max_file_bytes == 50 * 1024 * 1024


def test_sections_override_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "engine:\n  strict_modes: true\n  clahe_tiles: 4\nworker:\n  backend: thread\nio:\n  output_dir: out\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.engine.strict_modes is True
    assert config.engine.clahe_tiles == 4
    assert config.engine.background_divisor == 25
    assert config.worker.backend == "thread"
    assert config.io.output_dir == Path("out")


def test_non_mapping_section_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("engine: 5\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)


def test_unknown_backend_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("worker:\n  backend: cluster\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_max_filter_method_is_configurable(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("engine:\n  max_filter: deque\n", encoding="utf-8")
    assert load_config(path).engine.max_filter == "deque"


def test_unknown_max_filter_method_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("engine:\n  max_filter: naive\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
