"""
src/api/forward.py
===================
Contact Forwarding Endpoint - VoiceBase Connect Gateway

Responsibility:
    - Expose POST /api/v1/contacts: accept one contact record as JSON and
      forward it to the processing API
    - Expose POST /api/v1/contacts/preview: return the request that would
      be submitted, without submitting it
    - Map failures to HTTP responses that tell the upstream transport
      whether to redeliver:
          missing contact id / recording  → 400
          retryable submission failure    → 503
          terminal submission failure     → 502

This module does NOT:
    - Build requests or talk to the processing API itself
    - Schedule retries (the delivering transport does)
"""

import asyncio
import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from src.attributes.contact import ContactRecordError
from src.client.errors import ApiError
from src.config import load_settings
from src.pipeline import forward_contact, preview_request

logger = logging.getLogger("vbgateway.api")

SERVICE_NAME = "voicebase-connect-gateway"
SERVICE_VERSION = "0.13.0"


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="VoiceBase Connect Gateway",
    description="Forwards completed contact-center calls to speech analytics processing.",
    version=SERVICE_VERSION,
)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@app.post("/api/v1/contacts")
async def forward(record: dict[str, Any] = Body(...)):
    """
    Forward one contact record.

    Returns the acceptance summary {"contactId", "mediaId", "status"}.
    """
    settings = load_settings()

    try:
        result = await asyncio.to_thread(forward_contact, record, settings)
    except ContactRecordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ApiError as exc:
        return JSONResponse(
            status_code=503 if exc.retryable else 502,
            content=exc.to_dict(),
        )
    except RuntimeError as exc:
        logger.error("Forwarding runtime error: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))

    return JSONResponse(status_code=202, content=result)


@app.post("/api/v1/contacts/preview")
async def preview(record: dict[str, Any] = Body(...)):
    """Return the configuration and metadata that would be submitted."""
    try:
        request = preview_request(record, load_settings())
    except ContactRecordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return JSONResponse(status_code=200, content=request.to_dict())
