"""Configuration helpers for the document scan engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import logging

import yaml

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class EngineConfig:
    strict_modes: bool = False
    large_image_pixels: int = 1500 * 1500
    background_divisor: int = 25
    reduced_background_divisor: int = 20
    min_background_radius: int = 10
    sauvola_r: float = 128.0
    clahe_tiles: int = 8
    max_filter: str = "blocks"  # "blocks" or "deque"
    log_level: Optional[str] = None


@dataclass(slots=True)
class WorkerConfig:
    backend: str = "process"  # "process" or "thread"
    start_method: Optional[str] = None


@dataclass(slots=True)
class IOConfig:
    max_file_bytes: int = 50 * 1024 * 1024
    max_pixels: int = 100_000_000
    output_dir: Path = Path("output")


@dataclass(slots=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    worker: WorkerConfig = field(default_factory=WorkerConfig)
    io: IOConfig = field(default_factory=IOConfig)


WORKER_BACKENDS = {"process", "thread"}
MAX_FILTER_METHODS = {"blocks", "deque"}


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"Section '{key}' must be a mapping")
    return value


def config_from_dict(raw: Dict[str, Any]) -> AppConfig:
    engine_cfg = _section(raw, "engine")
    worker_cfg = _section(raw, "worker")
    io_cfg = _section(raw, "io")

    backend = str(worker_cfg.get("backend", "process"))
    if backend not in WORKER_BACKENDS:
        raise ValueError(f"Unknown worker backend '{backend}' (expected one of {sorted(WORKER_BACKENDS)})")
    max_filter = str(engine_cfg.get("max_filter", "blocks"))
    if max_filter not in MAX_FILTER_METHODS:
        raise ValueError(f"Unknown max filter method '{max_filter}' (expected one of {sorted(MAX_FILTER_METHODS)})")

    config = AppConfig(
        engine=EngineConfig(
            strict_modes=bool(engine_cfg.get("strict_modes", False)),
            large_image_pixels=int(engine_cfg.get("large_image_pixels", 1500 * 1500)),
            background_divisor=int(engine_cfg.get("background_divisor", 25)),
            reduced_background_divisor=int(engine_cfg.get("reduced_background_divisor", 20)),
            min_background_radius=int(engine_cfg.get("min_background_radius", 10)),
            sauvola_r=float(engine_cfg.get("sauvola_r", 128.0)),
            clahe_tiles=int(engine_cfg.get("clahe_tiles", 8)),
            max_filter=max_filter,
            log_level=engine_cfg.get("log_level"),
        ),
        worker=WorkerConfig(
            backend=backend,
            start_method=worker_cfg.get("start_method"),
        ),
        io=IOConfig(
            max_file_bytes=int(io_cfg.get("max_file_bytes", 50 * 1024 * 1024)),
            max_pixels=int(io_cfg.get("max_pixels", 100_000_000)),
            output_dir=Path(io_cfg.get("output_dir", "output")),
        ),
    )
    LOGGER.debug("Loaded configuration: %s", config)
    return config


def load_config(path: Optional[Path]) -> AppConfig:
    """Load configuration from a YAML file; a missing path yields defaults."""
    if path is None or not path.exists():
        if path is not None:
            LOGGER.info("Config file %s not found; using defaults", path)
        return AppConfig()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise TypeError(f"{path} must contain a mapping at the top level")
    LOGGER.debug("Using PyYAML to parse %s", path)
    return config_from_dict(raw)
