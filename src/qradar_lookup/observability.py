"""Optional Pydantic Logfire instrumentation.

When QRADARLOOKUP_LOGFIRE_TOKEN is set, Logfire is configured, the httpx
client used for QRadar requests is traced and standard library logging is
forwarded. Without a token every function here is a no-op.
"""

from __future__ import annotations

import logging

from qradar_lookup.config import Settings

logger = logging.getLogger(__name__)

_logfire_initialized = False


def initialize_logfire(settings: Settings) -> bool:
    """Initialize Pydantic Logfire if a token is configured.

    Args:
        settings: Application settings holding the optional token

    Returns:
        bool: True if logfire is initialized, False otherwise
    """
    global _logfire_initialized

    if _logfire_initialized:
        logger.debug("Logfire already initialized, skipping")
        return True

    if not settings.logfire_token:
        logger.info("Logfire token not configured, observability disabled")
        return False

    try:
        import logfire

        logfire.configure(token=settings.logfire_token)
        logfire.instrument_httpx()
        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())
    except Exception:
        logger.exception("Failed to initialize Logfire")
        return False

    _logfire_initialized = True
    logger.info("Logfire initialized successfully")
    return True
