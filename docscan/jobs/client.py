"""Caller side of the job protocol: futures correlated by job id."""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import itertools
import logging
import multiprocessing
import queue
import threading

import numpy as np

from docscan.config import EngineConfig, WorkerConfig
from docscan.errors import error_from_response
from docscan.geometry.homography import Point

from .dispatcher import STOP, serve
from .protocol import KIND_ENHANCE, KIND_TRANSFORM, JobRequest

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class JobResult:
    pixels: bytes
    width: int
    height: int
    steps: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def _as_bytes(pixels: Any) -> bytes:
    if isinstance(pixels, np.ndarray):
        return pixels.astype(np.uint8, copy=False).tobytes()
    return bytes(pixels)


class WorkerClient:
    """Owns one background worker and the futures of its in-flight jobs.

    Jobs run strictly in submission order. There is no timeout: a job the
    worker never answers leaves its future pending.
    """

    def __init__(self, worker_config: WorkerConfig | None = None, engine_config: EngineConfig | None = None) -> None:
        self.worker_config = worker_config or WorkerConfig()
        self.engine_config = engine_config or EngineConfig()
        self._pending: Dict[int, Future] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._closed = False

        if self.worker_config.backend == "thread":
            self._inbox: Any = queue.Queue()
            self._outbox: Any = queue.Queue()
            self._worker: Any = threading.Thread(
                target=serve,
                args=(self._inbox, self._outbox, self.engine_config),
                name="docscan-worker",
                daemon=True,
            )
        elif self.worker_config.backend == "process":
            context = multiprocessing.get_context(self.worker_config.start_method)
            self._inbox = context.Queue()
            self._outbox = context.Queue()
            self._worker = context.Process(
                target=serve,
                args=(self._inbox, self._outbox, self.engine_config),
                name="docscan-worker",
                daemon=True,
            )
        else:
            raise ValueError(f"Unknown worker backend: {self.worker_config.backend!r}")

        self._receiver = threading.Thread(target=self._receive, name="docscan-receiver", daemon=True)
        self._worker.start()
        self._receiver.start()
        LOGGER.debug("Started %s worker", self.worker_config.backend)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, kind: str, payload: Dict[str, Any]) -> Future:
        future: Future = Future()
        with self._lock:
            if self._closed:
                raise RuntimeError("Worker client is closed")
            job_id = next(self._ids)
            self._pending[job_id] = future
            self._inbox.put(JobRequest(kind=kind, id=job_id, payload=payload).to_message())
        LOGGER.debug("Submitted job %s (%s)", job_id, kind)
        return future

    def enhance(self, pixels: Any, width: int, height: int, mode: str = "auto", intensity: float = 100) -> Future:
        return self.submit(
            KIND_ENHANCE,
            {
                "pixels": _as_bytes(pixels),
                "width": width,
                "height": height,
                "mode": mode,
                "intensity": intensity,
            },
        )

    def transform(
        self,
        pixels: Any,
        source_width: int,
        source_height: int,
        corners: Sequence[Point],
        output_width: int,
        output_height: int,
    ) -> Future:
        return self.submit(
            KIND_TRANSFORM,
            {
                "pixels": _as_bytes(pixels),
                "sourceWidth": source_width,
                "sourceHeight": source_height,
                "corners": [{"x": float(x), "y": float(y)} for x, y in corners],
                "outputWidth": output_width,
                "outputHeight": output_height,
            },
        )

    def _receive(self) -> None:
        while True:
            response = self._outbox.get()
            if response is STOP:
                break
            self._resolve(response)

    def _resolve(self, response: Dict[str, Any]) -> None:
        job_id = response.get("id")
        with self._lock:
            future = self._pending.pop(job_id, None)
        if future is None:
            LOGGER.warning("Dropping response for unknown job %s", job_id)
            return
        if not future.set_running_or_notify_cancel():
            LOGGER.debug("Dropping response for cancelled job %s", job_id)
            return
        if response.get("ok"):
            future.set_result(
                JobResult(
                    pixels=response["pixels"],
                    width=response["width"],
                    height=response["height"],
                    steps=list(response.get("steps", [])),
                    elapsed_seconds=float(response.get("elapsed", 0.0)),
                )
            )
        else:
            future.set_exception(
                error_from_response(response.get("error", ""), job_id, response.get("code", "internal_error"))
            )

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop accepting jobs, let queued ones finish, then stop the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._inbox.put(STOP)
        self._worker.join(timeout)
        self._outbox.put(STOP)
        self._receiver.join(timeout)
        LOGGER.debug("Worker stopped (%d jobs left pending)", self.pending_count)

    def __enter__(self) -> "WorkerClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_instance: Optional[WorkerClient] = None
_instance_lock = threading.Lock()


def get_worker(worker_config: WorkerConfig | None = None, engine_config: EngineConfig | None = None) -> WorkerClient:
    """Shared client, created on first use."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = WorkerClient(worker_config, engine_config)
        return _instance


def terminate_worker() -> None:
    global _instance
    with _instance_lock:
        if _instance is not None:
            _instance.close()
            _instance = None
