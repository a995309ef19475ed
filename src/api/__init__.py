# src/api/__init__.py
# =====================
# API Layer - VoiceBase Connect Gateway
#
# Responsibility:
#   - Accept contact records over HTTP (POST /api/v1/contacts)
#   - Preview synthesized requests (POST /api/v1/contacts/preview)
#   - Report failures with a retryable flag for the delivering transport
