"""JSON implementation of the job payload encoder."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict

from job_queue_messaging.contracts import IPayloadEncoder


class JSONPayloadEncoder(IPayloadEncoder):
    """Encodes jobs as JSON objects of the form ``{"job": ..., "data": ...}``.

    ``bytes`` are treated as an already encoded payload and passed through untouched.
    Objects exposing ``to_dict()`` are stored under their qualified class name.
    """

    def encode(self, job: Any, data: Any = None) -> bytes:
        if isinstance(job, bytes):
            return job

        if isinstance(job, Mapping):
            payload: Dict[str, Any] = dict(job)
            if data is not None:
                payload["data"] = data
        elif isinstance(job, str):
            payload = {"job": job, "data": data}
        elif hasattr(job, "to_dict"):
            job_class = type(job)
            payload = {
                "job": f"{job_class.__module__}.{job_class.__qualname__}",
                "data": job.to_dict() if data is None else data,
            }
        else:
            raise ValueError(f"Unsupported job type: {type(job).__name__}")

        try:
            return json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ValueError("Job payload is not JSON serializable.") from exc

    def decode(self, payload: bytes) -> Dict[str, Any]:
        try:
            decoded = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValueError("Failed to decode job payload as JSON.") from exc

        if not isinstance(decoded, dict):
            raise ValueError("Job payload must be a JSON object.")
        return decoded
