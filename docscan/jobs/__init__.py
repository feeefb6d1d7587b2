"""Asynchronous job protocol between callers and the image worker."""

from .client import JobResult, WorkerClient, get_worker, terminate_worker
from .dispatcher import handle_message, serve

__all__ = ["JobResult", "WorkerClient", "get_worker", "handle_message", "serve", "terminate_worker"]
