"""
src/request/enums.py
=====================
Request Enumerations - VoiceBase Connect Gateway

Canonical values accepted by the remote processing API for job priority,
callback include sections and callback HTTP methods, together with total
lookup functions that translate free-text tokens into them.

Lookups never raise: an unknown or blank token yields None, so callers can
treat "unknown" as an ordinary branch.
"""

from enum import Enum


class Priority(str, Enum):
    """Processing priority of a media job."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class IncludeType(str, Enum):
    """Result sections a callback may include."""

    TRANSCRIPT = "transcript"
    KNOWLEDGE = "knowledge"
    METADATA = "metadata"
    PREDICTION = "prediction"
    STREAMS = "streams"
    SPOTTING = "spotting"
    METRICS = "metrics"
    CATEGORIES = "categories"
    MESSAGES = "messages"


class HttpMethod(str, Enum):
    """HTTP method used to deliver a callback."""

    POST = "POST"
    PUT = "PUT"


def _lookup(enum_cls: type[Enum], token: str | None):
    if token is None:
        return None
    wanted = token.strip().lower()
    if not wanted:
        return None
    for member in enum_cls:
        if member.value.lower() == wanted or member.name.lower() == wanted:
            return member
    return None


def lookup_priority(token: str | None) -> Priority | None:
    return _lookup(Priority, token)


def lookup_include_type(token: str | None) -> IncludeType | None:
    return _lookup(IncludeType, token)


def lookup_http_method(token: str | None) -> HttpMethod | None:
    return _lookup(HttpMethod, token)
