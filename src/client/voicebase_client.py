"""
src/client/voicebase_client.py
===============================
Processing API Client - VoiceBase Connect Gateway

Responsibility:
    - Submit a media processing request (media URL, configuration,
      metadata) to the remote API as multipart/form-data
    - Turn every failure into an ApiError carrying the HTTP status and the
      parsed error body, so the caller can decide whether to retry

Network-level failures (connection errors, timeouts) surface as an
ApiError with status 0, which classifies as retryable.

This module does NOT:
    - Build configurations (see src/request/builder.py)
    - Retry failed calls
    - Validate the API token
"""

import json
import logging
from typing import Any

import requests

from src.client.errors import ApiError, parse_error_response
from src.config import Settings
from src.request.models import MediaProcessingRequest

logger = logging.getLogger("vbgateway.client.voicebase_client")

MEDIA_ENDPOINT = "media"


class VoiceBaseClient:
    """Thin synchronous client for the processing API's media endpoint."""

    def __init__(self, base_url: str, token: str | None, timeout: float = 30) -> None:
        if not token:
            raise RuntimeError("VOICEBASE_TOKEN environment variable is not set.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token

    @classmethod
    def from_settings(cls, settings: Settings) -> "VoiceBaseClient":
        return cls(settings.api_url, settings.token, settings.timeout_seconds)

    @property
    def media_url(self) -> str:
        return f"{self.base_url}/{MEDIA_ENDPOINT}"

    def submit(self, request: MediaProcessingRequest, media_url: str) -> dict[str, Any]:
        """
        Submit ``request`` for the recording at ``media_url``.

        Returns:
            The API's JSON acceptance body (contains ``mediaId``).

        Raises:
            ApiError: On any non-2xx response or transport failure.
        """
        payload = request.to_dict()
        files = {
            "mediaUrl": (None, media_url),
            "configuration": (None, json.dumps(payload["configuration"]), "application/json"),
            "metadata": (None, json.dumps(payload["metadata"]), "application/json"),
        }
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

        external_id = request.metadata.external_id
        logger.debug("Submitting contact %s to %s", external_id, self.media_url)

        try:
            resp = requests.post(
                self.media_url,
                headers=headers,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ApiError(f"Processing API request failed: {exc}") from exc

        if not resp.ok:
            error = parse_error_response(resp.text)
            raise ApiError(
                f"Processing API rejected contact {external_id}",
                status_code=resp.status_code,
                error=error,
            )

        try:
            body = resp.json()
        except ValueError:
            logger.warning(
                "Processing API accepted contact %s but returned no JSON (status %d)",
                external_id, resp.status_code,
            )
            body = {}
        if not isinstance(body, dict):
            body = {}

        logger.info(
            "Contact %s accepted as media %s", external_id, body.get("mediaId"),
        )
        return body
