"""Document scan enhancement and perspective correction engine."""

from .config import AppConfig, EngineConfig, load_config
from .errors import DocscanError, JobFailedError, PayloadError, SingularHomographyError
from .jobs import WorkerClient, get_worker, terminate_worker

__version__ = "0.3.0"

__all__ = [
    "AppConfig",
    "DocscanError",
    "EngineConfig",
    "JobFailedError",
    "PayloadError",
    "SingularHomographyError",
    "WorkerClient",
    "get_worker",
    "load_config",
    "terminate_worker",
]
