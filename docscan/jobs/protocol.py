"""Wire schema for worker jobs.

Request::

    {"kind": "enhance", "id": 7,
     "payload": {"pixels": b"...", "width": w, "height": h,
                 "mode": "auto", "intensity": 100}}
    {"kind": "transform", "id": 8,
     "payload": {"pixels": b"...", "sourceWidth": sw, "sourceHeight": sh,
                 "corners": [{"x": .., "y": ..}] * 4,
                 "outputWidth": ow, "outputHeight": oh}}

Response::

    {"id": 7, "ok": True, "pixels": b"...", "width": w, "height": h}
    {"id": 8, "ok": False, "error": "...", "code": "degenerate_quad"}
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from docscan.errors import PayloadError
from docscan.geometry.homography import Point
from docscan.geometry.quad import parse_corners

KIND_ENHANCE = "enhance"
KIND_TRANSFORM = "transform"
KINDS = {KIND_ENHANCE, KIND_TRANSFORM}


@dataclass(slots=True)
class JobRequest:
    kind: str
    id: int
    payload: Dict[str, Any]

    def to_message(self) -> Dict[str, Any]:
        return {"kind": self.kind, "id": self.id, "payload": self.payload}


@dataclass(slots=True)
class EnhancePayload:
    pixels: Any
    width: int
    height: int
    mode: object
    intensity: float


@dataclass(slots=True)
class TransformPayload:
    pixels: Any
    source_width: int
    source_height: int
    corners: List[Point]
    output_width: int
    output_height: int


def _require(payload: Dict[str, Any], key: str) -> Any:
    if key not in payload:
        raise PayloadError(f"payload must include '{key}'")
    return payload[key]


def _int_field(payload: Dict[str, Any], key: str) -> int:
    value = _require(payload, key)
    if isinstance(value, bool):
        raise PayloadError(f"'{key}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"'{key}' must be an integer, got {value!r}") from exc


def parse_request(message: Any) -> JobRequest:
    if not isinstance(message, dict):
        raise PayloadError("job message must be a mapping")
    job_id = message.get("id")
    if not isinstance(job_id, int) or isinstance(job_id, bool):
        raise PayloadError(f"job id must be an integer, got {job_id!r}")
    kind = message.get("kind")
    if kind not in KINDS:
        raise PayloadError(f"Unknown job kind: {kind!r}")
    payload = message.get("payload")
    if not isinstance(payload, dict):
        raise PayloadError("job payload must be a mapping")
    return JobRequest(kind=kind, id=job_id, payload=payload)


def parse_enhance_payload(payload: Dict[str, Any]) -> EnhancePayload:
    intensity = _require(payload, "intensity")
    try:
        intensity_value = float(intensity)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"'intensity' must be a number, got {intensity!r}") from exc
    return EnhancePayload(
        pixels=_require(payload, "pixels"),
        width=_int_field(payload, "width"),
        height=_int_field(payload, "height"),
        mode=payload.get("mode"),
        intensity=intensity_value,
    )


def parse_transform_payload(payload: Dict[str, Any]) -> TransformPayload:
    raw_corners = _require(payload, "corners")
    try:
        corners = parse_corners(raw_corners)
    except (KeyError, TypeError, ValueError) as exc:
        raise PayloadError(f"'corners' must be four {{x, y}} points: {exc}") from exc
    if len(corners) != 4:
        raise PayloadError(f"'corners' must hold exactly 4 points, got {len(corners)}")
    output_width = _int_field(payload, "outputWidth")
    output_height = _int_field(payload, "outputHeight")
    if output_width <= 0 or output_height <= 0:
        raise PayloadError(f"Output size must be positive, got {output_width}x{output_height}")
    return TransformPayload(
        pixels=_require(payload, "pixels"),
        source_width=_int_field(payload, "sourceWidth"),
        source_height=_int_field(payload, "sourceHeight"),
        corners=corners,
        output_width=output_width,
        output_height=output_height,
    )


def success_response(job_id: int, pixels: bytes, width: int, height: int, **extra: Any) -> Dict[str, Any]:
    response = {"id": job_id, "ok": True, "pixels": pixels, "width": width, "height": height}
    response.update(extra)
    return response


def failure_response(job_id: Optional[int], error: str, code: str) -> Dict[str, Any]:
    return {"id": job_id, "ok": False, "error": error, "code": code}
