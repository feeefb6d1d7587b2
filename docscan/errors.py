"""Exception types shared by the engine, the job protocol and the CLI."""
from __future__ import annotations

from typing import Optional


class DocscanError(Exception):
    """Base class for expected engine failures."""

    code = "internal_error"


class PayloadError(DocscanError, ValueError):
    """Raised when a job request or its payload is malformed."""

    code = "invalid_payload"


class SingularHomographyError(DocscanError):
    """Raised when the corner quadrilateral yields no usable homography."""

    code = "degenerate_quad"


class QuadError(DocscanError, ValueError):
    """Raised by caller-side quadrilateral checks (size limits)."""

    code = "invalid_payload"


class ImageTooLargeError(DocscanError):
    """Raised when an input file exceeds the configured size limits."""

    code = "invalid_payload"


class JobFailedError(DocscanError):
    """Failure reported by the worker for a single job."""

    def __init__(self, message: str, job_id: Optional[int] = None, code: str = "internal_error") -> None:
        super().__init__(message)
        self.job_id = job_id
        self.code = code


ERRORS_BY_CODE = {
    SingularHomographyError.code: SingularHomographyError,
    PayloadError.code: PayloadError,
}


def error_from_response(message: str, job_id: int, code: str) -> DocscanError:
    """Rebuild a typed exception from a failure response."""
    error_cls = ERRORS_BY_CODE.get(code)
    if error_cls is None:
        return JobFailedError(message, job_id=job_id, code=code)
    error = error_cls(message)
    error.job_id = job_id  # type: ignore[attr-defined]
    return error
