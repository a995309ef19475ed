"""
src/client/errors.py
=====================
API Errors & Retry Classification - VoiceBase Connect Gateway

Responsibility:
    - Represent a failed call to the processing API (status code plus the
      structured error body, when the API sent one)
    - Decide whether resubmitting the same request is worthwhile

Retry policy:
    Every status is retryable except 400. A 400 means the request itself is
    malformed and resubmitting it unchanged cannot succeed. Server errors,
    rate limiting (429) and network-level failures (status 0) are treated
    as transient.

This module does NOT:
    - Schedule retries or count attempts (the caller owns that)
    - Perform HTTP calls
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("vbgateway.client.errors")

NON_RETRYABLE_STATUS_CODE = 400

# status used when the request never produced an HTTP response
NETWORK_ERROR_STATUS_CODE = 0


def is_retryable(status_code: int) -> bool:
    """Return True unless ``status_code`` is 400."""
    return status_code != NON_RETRYABLE_STATUS_CODE


@dataclass(frozen=True)
class ErrorResponse:
    """Structured error body returned by the processing API."""

    status: int | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)
    reference: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "errors": list(self.errors),
            "reference": self.reference,
        }


def parse_error_response(body: Any) -> ErrorResponse | None:
    """
    Parse an error body leniently.

    Accepts a decoded JSON object or raw text. Returns None when the body
    carries nothing recognizable; never raises.
    """
    if isinstance(body, (bytes, str)):
        try:
            body = json.loads(body)
        except ValueError:
            return None

    if not isinstance(body, dict):
        return None

    status = body.get("status")
    if not isinstance(status, int) or isinstance(status, bool):
        status = None

    messages: list[str] = []
    raw_errors = body.get("errors")
    if isinstance(raw_errors, list):
        for item in raw_errors:
            if isinstance(item, dict) and item.get("error"):
                messages.append(str(item["error"]))
            elif isinstance(item, str) and item:
                messages.append(item)
    elif isinstance(body.get("error"), str):
        messages.append(body["error"])

    reference = body.get("reference")
    if reference is not None:
        reference = str(reference)

    if status is None and not messages and reference is None:
        return None
    return ErrorResponse(status=status, errors=tuple(messages), reference=reference)


class ApiError(Exception):
    """Raised when the processing API rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: int = NETWORK_ERROR_STATUS_CODE,
        error: ErrorResponse | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error = error
        super().__init__(f"{message} (status {status_code})")

    @property
    def retryable(self) -> bool:
        return is_retryable(self.status_code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "retryable": self.retryable,
            "message": self.message,
            "errors": list(self.error.errors) if self.error else [],
        }
