"""TLS verification safeguards for the QRadar offense client.

QRadar appliances frequently ship with self-signed certificates, so lab and
staging setups need a way to turn certificate verification off. The switch is
an explicit field of the client configuration; these helpers make sure it is
never honoured in a production environment and that every use is loud.
"""

import logging
import os
import warnings
from typing import Final

logger = logging.getLogger(__name__)

ENVIRONMENT_ENV: Final[str] = "QRADARLOOKUP_ENV"
DEFAULT_ENVIRONMENT: Final[str] = "production"

FORBIDDEN_PRODUCTION_ENVIRONMENTS: Final[tuple[str, ...]] = ("production", "prod")
DEVELOPMENT_ENVIRONMENTS: Final[tuple[str, ...]] = ("development", "dev", "test", "testing")

TLS_BYPASS_FORBIDDEN_MESSAGE: Final[str] = (
    "TLS verification bypass is FORBIDDEN in production environments. "
    "Install the QRadar console certificate in the trust store instead."
)

TLS_BYPASS_WARNING_MESSAGE: Final[str] = (
    "SECURITY WARNING: TLS certificate verification is DISABLED for {target_url}! "
    "Connections to this QRadar server can be intercepted. "
    "Only use this against lab or staging consoles on trusted networks."
)


def default_environment() -> str:
    """Return the environment name from QRADARLOOKUP_ENV, defaulting to production."""
    return os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def is_production_environment(environment: str | None = None) -> bool:
    """Check if the environment is production.

    Args:
        environment: Environment name. Read from QRADARLOOKUP_ENV when None.

    Returns:
        True if the environment is considered production.
    """
    if environment is None:
        environment = default_environment()
    return environment.lower() in FORBIDDEN_PRODUCTION_ENVIRONMENTS


def is_development_environment(environment: str | None = None) -> bool:
    """Check if the environment is development-like."""
    if environment is None:
        environment = default_environment()
    return environment.lower() in DEVELOPMENT_ENVIRONMENTS


def validate_tls_bypass(
    skip_tls_verify: bool, target_url: str, environment: str | None = None
) -> None:
    """Validate a request to disable TLS certificate verification.

    Args:
        skip_tls_verify: Whether verification bypass is requested.
        target_url: The QRadar URL the bypass would apply to.
        environment: Environment name. Read from QRADARLOOKUP_ENV when None.

    Raises:
        ValueError: If the bypass is requested in a production environment.
    """
    if not skip_tls_verify:
        return

    if environment is None:
        environment = default_environment()

    if is_production_environment(environment):
        raise ValueError(TLS_BYPASS_FORBIDDEN_MESSAGE)

    warnings.warn(
        TLS_BYPASS_WARNING_MESSAGE.format(target_url=target_url),
        UserWarning,
        stacklevel=4,
    )
    logger.critical(
        "TLS certificate verification is DISABLED for QRadar connections",
        extra={"target_url": target_url, "environment": environment},
    )

    if not is_development_environment(environment):
        logger.error(
            "TLS verification disabled outside a development environment",
            extra={"environment": environment},
        )
