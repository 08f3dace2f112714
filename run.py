#!/usr/bin/env python3
"""Run script for RSVP Manager."""
import logging

import uvicorn

from app.config import settings

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    options = {}
    if settings.tls_enabled:
        options["ssl_certfile"] = settings.TLS_CERT_PATH
        options["ssl_keyfile"] = settings.TLS_KEY_PATH
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        **options,
    )
