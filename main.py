"""
main.py
========
Central entry point for the VoiceBase Connect Gateway.

Run with:
    uvicorn main:app --reload
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before any module reads env vars

# Configure logging for the entire application
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Keep HTTP transport chatter out of the gateway log
for _transport_logger_name in ("urllib3", "urllib3.connectionpool"):
    logging.getLogger(_transport_logger_name).setLevel(logging.WARNING)

from src.api.forward import SERVICE_NAME, SERVICE_VERSION, app  # noqa: F401, E402

logging.getLogger("vbgateway").info(
    "This is %s version %s running as pid %d", SERVICE_NAME, SERVICE_VERSION, os.getpid(),
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
