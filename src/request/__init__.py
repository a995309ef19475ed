# src/request/__init__.py
# ========================
# Request Synthesis Layer - VoiceBase Connect Gateway
#
# Responsibility:
#   - Build the processing configuration + metadata envelope for a
#     contact record, honoring deployment feature toggles
#   - Canonical enums for priority, callback includes and methods
#
# Public API:
#   - RequestBuilder / build_request()
#   - MediaProcessingRequest, Configuration, Metadata
#   - CallbackDescriptor

from src.request.builder import RequestBuilder, build_request  # noqa: F401
from src.request.callbacks import CallbackDescriptor  # noqa: F401
from src.request.enums import HttpMethod, IncludeType, Priority  # noqa: F401
from src.request.models import (  # noqa: F401
    Configuration,
    MediaProcessingRequest,
    Metadata,
)
