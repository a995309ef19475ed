# src/client/__init__.py
# =======================
# Processing API Client Layer - VoiceBase Connect Gateway
#
# Responsibility:
#   - Submit built requests to the remote processing API
#   - Classify failures as retryable or terminal
#
# Public API:
#   - VoiceBaseClient
#   - ApiError, ErrorResponse, is_retryable()

from src.client.errors import ApiError, ErrorResponse, is_retryable  # noqa: F401
from src.client.voicebase_client import VoiceBaseClient  # noqa: F401
