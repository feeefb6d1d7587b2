"""Job handlers, one per request kind.

Each module exposes `run(payload: dict, config: EngineConfig | None)` which
accepts the request payload and returns the JSON-friendly body of a success
response:
{
    "pixels": <bytes>,
    "width": <int>,
    "height": <int>,
    "steps": [...],
    "elapsed": <float seconds>
}
Expected failures are raised as `docscan.errors.DocscanError` subclasses.
"""

from .enhance import run as run_enhance
from .transform import run as run_transform

__all__ = ["run_enhance", "run_transform"]
