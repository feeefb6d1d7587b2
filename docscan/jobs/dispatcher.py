"""Worker side of the job protocol.

The worker takes one request at a time from its inbox, runs it to
completion and posts exactly one response. Failures end the job, never the
worker.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import logging

from docscan.config import EngineConfig
from docscan.errors import DocscanError

from .protocol import KIND_ENHANCE, KIND_TRANSFORM, failure_response, parse_request, success_response
from .services import run_enhance, run_transform

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any], Optional[EngineConfig]], Dict[str, Any]]

HANDLERS: Dict[str, Handler] = {
    KIND_ENHANCE: run_enhance,
    KIND_TRANSFORM: run_transform,
}

STOP = None


def handle_message(message: Any, config: EngineConfig | None = None) -> Dict[str, Any]:
    job_id = message.get("id") if isinstance(message, dict) else None
    try:
        request = parse_request(message)
        LOGGER.debug("Job %s (%s) started", request.id, request.kind)
        body = HANDLERS[request.kind](request.payload, config)
        return success_response(request.id, **body)
    except DocscanError as exc:
        LOGGER.warning("Job %s failed (%s): %s", job_id, exc.code, exc)
        return failure_response(job_id, str(exc), exc.code)
    except Exception as exc:
        LOGGER.exception("Job %s crashed", job_id)
        return failure_response(job_id, str(exc) or exc.__class__.__name__, "internal_error")


def serve(inbox: Any, outbox: Any, config: EngineConfig | None = None) -> None:
    """Actor loop over queue-like ``inbox``/``outbox`` until the stop sentinel."""
    if config is not None and config.log_level:
        logging.getLogger("docscan").setLevel(config.log_level.upper())
    LOGGER.debug("Worker loop started")
    while True:
        message = inbox.get()
        if message is STOP:
            break
        outbox.put(handle_message(message, config))
    LOGGER.debug("Worker loop stopped")
