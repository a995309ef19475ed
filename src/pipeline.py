"""
src/pipeline.py
================
Contact Forwarding Pipeline - VoiceBase Connect Gateway

Responsibility:
    1. Fail fast on records without a contact id or recording location
    2. Build the processing request from the record's attributes
    3. Submit it to the processing API
    4. Return the acceptance summary, or let the classified ApiError
       propagate so the caller can schedule a retry

Each record is processed independently; nothing is shared between calls
except the immutable deployment settings.

This layer MUST NOT:
    - Interpret attributes itself (that is src/request/builder.py)
    - Retry failed submissions
"""

import logging
from typing import Any

from src.attributes.contact import get_recording_url, require_contact_id
from src.client.errors import ApiError
from src.client.voicebase_client import VoiceBaseClient
from src.config import Settings, load_settings
from src.request.builder import RequestBuilder
from src.request.models import MediaProcessingRequest

logger = logging.getLogger("vbgateway.pipeline")


def preview_request(
    record: dict[str, Any],
    settings: Settings | None = None,
) -> MediaProcessingRequest:
    """
    Build the request for ``record`` without submitting it.

    Raises:
        ContactRecordError: If the record has no contact id.
    """
    if settings is None:
        settings = load_settings()
    return RequestBuilder.from_settings(settings).build(record)


def forward_contact(
    record: dict[str, Any],
    settings: Settings | None = None,
    client: VoiceBaseClient | None = None,
) -> dict[str, Any]:
    """
    Build and submit the processing request for one contact record.

    Args:
        record:   Contact record (ContactId, Attributes, Recording).
        settings: Deployment settings; loaded from the environment if omitted.
        client:   Processing API client; built from ``settings`` if omitted.

    Returns:
        {"contactId": str, "mediaId": str | None, "status": str}

    Raises:
        ContactRecordError: If the record lacks a contact id or recording.
        ApiError:           If submission fails; ``retryable`` tells the
                            caller whether resubmitting may succeed.
    """
    if settings is None:
        settings = load_settings()

    contact_id = require_contact_id(record)
    media_url = get_recording_url(record)

    request = RequestBuilder.from_settings(settings).build(record)
    logger.info(
        "Contact %s: request built (priority=%s)",
        contact_id, request.configuration.priority.value,
    )

    if client is None:
        client = VoiceBaseClient.from_settings(settings)

    try:
        body = client.submit(request, media_url)
    except ApiError as exc:
        if exc.retryable:
            logger.warning("Contact %s: retryable submission failure: %s", contact_id, exc)
        else:
            logger.error("Contact %s: submission rejected, not retrying: %s", contact_id, exc)
        raise

    return {
        "contactId": contact_id,
        "mediaId": body.get("mediaId"),
        "status": body.get("status", "accepted"),
    }
