"""User-Agent header for requests sent to QRadar."""

import logging
from functools import cache

logger = logging.getLogger(__name__)


@cache
def get_version() -> str:
    """Return the installed qradar_lookup version, or "unknown"."""
    try:
        from qradar_lookup import __version__

        return __version__
    except (ImportError, AttributeError):
        logger.debug("Could not retrieve __version__ from qradar_lookup package")
        return "unknown"


@cache
def get_user_agent() -> str:
    """Construct the User-Agent header value, e.g. ``qradar-lookup (version 0.3.0)``."""
    user_agent = f"qradar-lookup (version {get_version()})"
    logger.debug("Built User-Agent string", extra={"user_agent": user_agent})
    return user_agent
