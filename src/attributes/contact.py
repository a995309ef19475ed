"""
src/attributes/contact.py
==========================
Contact Record Accessors - VoiceBase Connect Gateway

A contact record is the JSON object emitted by the telephony platform when
a call completes. Only three parts of it matter here:

    ContactId           correlation id, required
    Attributes          flat map of call attributes, optional
    Recording.Location  where the call recording can be fetched

This module does NOT:
    - Interpret attributes (see extractor.py and src/request/builder.py)
    - Fetch or sign recording URLs
"""

import logging
from typing import Any

logger = logging.getLogger("vbgateway.attributes.contact")

CONTACT_ID = "ContactId"
ATTRIBUTES = "Attributes"
RECORDING = "Recording"
RECORDING_LOCATION = "Location"


class ContactRecordError(Exception):
    """Raised when a contact record lacks a required field."""
    pass


def get_contact_id(record: dict[str, Any]) -> str | None:
    contact_id = record.get(CONTACT_ID)
    if isinstance(contact_id, str) and contact_id.strip():
        return contact_id
    return None


def require_contact_id(record: dict[str, Any]) -> str:
    """
    Return the record's contact id.

    Raises:
        ContactRecordError: If the id is missing or blank.
    """
    contact_id = get_contact_id(record)
    if contact_id is None:
        raise ContactRecordError(f"Contact record has no {CONTACT_ID}.")
    return contact_id


def get_attributes(record: dict[str, Any]) -> dict[str, Any]:
    """Return the record's attribute map, or an empty dict if there is none."""
    attributes = record.get(ATTRIBUTES)
    if attributes is None:
        return {}
    if not isinstance(attributes, dict):
        logger.warning(
            "Ignoring %s of type %s for contact %s",
            ATTRIBUTES, type(attributes).__name__, get_contact_id(record),
        )
        return {}
    return attributes


def get_recording_url(record: dict[str, Any]) -> str:
    """
    Return the recording location of the call.

    Raises:
        ContactRecordError: If the record carries no recording location.
    """
    recording = record.get(RECORDING)
    location = recording.get(RECORDING_LOCATION) if isinstance(recording, dict) else None
    if not isinstance(location, str) or not location.strip():
        raise ContactRecordError(
            f"Contact {get_contact_id(record)} has no {RECORDING}.{RECORDING_LOCATION}."
        )
    return location.strip()
