"""Command-line entry point: enhance or perspective-crop page images."""
from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import argparse
import logging
import time

from .config import AppConfig, load_config
from .errors import DocscanError, QuadError
from .files import load_rgba, save_rgba
from .geometry import is_valid_quad, output_size_for_quad
from .imaging import EnhanceMode
from .jobs import WorkerClient

LOGGER = logging.getLogger(__name__)


def _parse_point(text: str) -> Tuple[float, float]:
    try:
        x, y = text.split(",")
        return float(x), float(y)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Corner must look like 'x,y', got {text!r}") from exc


def _parse_size(text: str) -> Tuple[int, int]:
    try:
        width, height = text.lower().split("x")
        return int(width), int(height)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Size must look like 'WIDTHxHEIGHT', got {text!r}") from exc


def _output_path(output_dir: Path, source: Path, suffix: str) -> Path:
    return output_dir / f"{source.stem}__{suffix}.png"


def run_enhance(config: AppConfig, inputs: Sequence[Path], mode: str, intensity: float, output_dir: Path) -> int:
    failures = 0
    with WorkerClient(config.worker, config.engine) as client:
        # Submit every page first; the worker still handles them one by one.
        jobs: List[Tuple[Path, Future]] = []
        for path in inputs:
            try:
                pixels, width, height = load_rgba(path, config.io)
            except (OSError, DocscanError) as exc:
                LOGGER.error("Failed to load %s: %s", path, exc)
                failures += 1
                continue
            jobs.append((path, client.enhance(pixels, width, height, mode=mode, intensity=intensity)))

        for path, future in jobs:
            try:
                result = future.result()
            except DocscanError as exc:
                LOGGER.error("Enhance failed for %s: %s", path, exc)
                failures += 1
                continue
            target = save_rgba(_output_path(output_dir, path, mode), result.pixels, result.width, result.height)
            LOGGER.info("%s -> %s (%.2fs, steps=%s)", path.name, target, result.elapsed_seconds, ", ".join(result.steps))
    return 1 if failures else 0


def run_crop(
    config: AppConfig,
    source: Path,
    corners: Sequence[Tuple[float, float]],
    size: Optional[Tuple[int, int]],
    output: Path,
) -> int:
    if not is_valid_quad(corners):
        LOGGER.error("Invalid crop shape: corners overlap or enclose too little area")
        return 1
    try:
        output_width, output_height = size or output_size_for_quad(corners)
    except QuadError as exc:
        LOGGER.error("%s", exc)
        return 1

    try:
        pixels, width, height = load_rgba(source, config.io)
    except (OSError, DocscanError) as exc:
        LOGGER.error("Failed to load %s: %s", source, exc)
        return 1
    with WorkerClient(config.worker, config.engine) as client:
        future = client.transform(pixels, width, height, corners, output_width, output_height)
        try:
            result = future.result()
        except DocscanError as exc:
            LOGGER.error("Crop failed: %s", exc)
            return 1
    save_rgba(output, result.pixels, result.width, result.height)
    LOGGER.info("Crop applied: %s -> %s (%dx%d)", source.name, output, result.width, result.height)
    return 0


def _setup_logging(verbose: bool, level_override: Optional[str] = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if level_override and not verbose:
        level = logging.getLevelName(level_override.upper())
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Document scan enhancement and perspective correction")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    enhance = commands.add_parser("enhance", help="Clean up one or more page images")
    enhance.add_argument("inputs", type=Path, nargs="+", help="Input images")
    enhance.add_argument("--mode", default=EnhanceMode.AUTO.value, help="auto, scan, lighten or sharpen")
    enhance.add_argument("--intensity", type=float, default=100.0, help="Blend strength 0..100")
    enhance.add_argument("--output", type=Path, default=None, help="Output directory")

    crop = commands.add_parser("crop", help="Rectify a quadrilateral region into a rectangle")
    crop.add_argument("input", type=Path, help="Input image")
    crop.add_argument(
        "--corners",
        type=_parse_point,
        nargs=4,
        required=True,
        metavar="X,Y",
        help="Top-left, top-right, bottom-right, bottom-left",
    )
    crop.add_argument("--size", type=_parse_size, default=None, help="Output size WIDTHxHEIGHT")
    crop.add_argument("--output", type=Path, default=None, help="Output PNG path")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    _setup_logging(args.verbose, config.engine.log_level)
    LOGGER.debug("Loaded config from %s", args.config)

    start = time.perf_counter()
    if args.command == "enhance":
        output_dir = args.output or config.io.output_dir
        code = run_enhance(config, args.inputs, args.mode, args.intensity, output_dir)
    else:
        output = args.output or _output_path(config.io.output_dir, args.input, "crop")
        code = run_crop(config, args.input, args.corners, args.size, output)
    LOGGER.info("Finished %s in %.2fs", args.command, time.perf_counter() - start)
    return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
