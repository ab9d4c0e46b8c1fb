"""Trace recording for generation calls."""

import json
import uuid
from datetime import datetime
from pathlib import Path

from ..settings import Settings
from .request import GenerationRequest, GenerationResult


def _trace_dir(base: str | Path) -> Path:
    date_str = datetime.now().strftime("%Y%m%d")
    trace_dir = Path(base) / date_str
    trace_dir.mkdir(parents=True, exist_ok=True)
    return trace_dir


def _request_data(request: GenerationRequest, settings: Settings) -> dict:
    return {
        "endpoint_url": settings.endpoint_url,
        "timeout_seconds": settings.timeout_seconds,
        "payload": request.to_payload(),
    }


def record_trace(
    request: GenerationRequest,
    result: GenerationResult,
    settings: Settings,
) -> Path:
    """Record a successful generation to ``{trace_dir}/{YYYYMMDD}/{request_id}.json``.

    Args:
        request: Request that was sent
        result: Result returned to the caller
        settings: Settings snapshot used for the call (must have trace_dir)

    Returns:
        Path to trace file
    """
    trace_data = {
        "request_id": result.request_id,
        "timestamp": datetime.now().isoformat(),
        "model": result.model,
        "request": _request_data(request, settings),
        "response": {
            "raw_text": result.raw_text,
            "code": result.code,
            "elapsed_ms": result.elapsed_ms,
        },
        "success": True,
    }

    trace_file = _trace_dir(settings.trace_dir) / f"{result.request_id}.json"
    with open(trace_file, "w") as f:
        json.dump(trace_data, f, indent=2)

    return trace_file


def record_error_trace(
    request: GenerationRequest,
    error: Exception,
    settings: Settings,
    elapsed_ms: int,
) -> Path:
    """Record a failed generation.

    Args:
        request: Request that was sent
        error: Exception that occurred
        settings: Settings snapshot used for the call (must have trace_dir)
        elapsed_ms: Time elapsed before failure

    Returns:
        Path to trace file
    """
    request_id = str(uuid.uuid4())

    error_data = {
        "type": type(error).__name__,
        "message": str(error),
    }
    # Carry the diagnostic fields of the client's own errors
    for attr in ("status_code", "raw_body"):
        if hasattr(error, attr):
            error_data[attr] = getattr(error, attr)

    trace_data = {
        "request_id": request_id,
        "timestamp": datetime.now().isoformat(),
        "model": request.model,
        "request": _request_data(request, settings),
        "error": error_data,
        "elapsed_ms": elapsed_ms,
        "success": False,
    }

    trace_file = _trace_dir(settings.trace_dir) / f"{request_id}.json"
    with open(trace_file, "w") as f:
        json.dump(trace_data, f, indent=2)

    return trace_file
