from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np
import pytest

from docscan.config import WorkerConfig
from docscan.imaging import PixelBuffer
from docscan.jobs import WorkerClient


def solid_rgba(width: int, height: int, rgb: Tuple[int, int, int], alpha: int = 255) -> bytes:
    pixel = bytes([rgb[0], rgb[1], rgb[2], alpha])
    return pixel * (width * height)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def random_pixels(rng: np.random.Generator) -> PixelBuffer:
    data = rng.integers(0, 256, size=(30, 40, 4), dtype=np.uint8)
    return PixelBuffer(data, 40, 30)


@pytest.fixture
def thread_client() -> Iterator[WorkerClient]:
    client = WorkerClient(WorkerConfig(backend="thread"))
    yield client
    client.close()
