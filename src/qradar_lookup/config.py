"""Application configuration management using Pydantic Settings.

Settings are read from ``QRADARLOOKUP_*`` environment variables. They supply
the connection and filter defaults for the command line tool; library callers
pass options explicitly instead.
"""

import logging
from functools import lru_cache
from typing import ClassVar, Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from qradar_lookup.libs.offenses.security import DEFAULT_ENVIRONMENT

logger = logging.getLogger(__name__)

ENV_PREFIX_NAME: Final[str] = "QRADARLOOKUP"
ENV_PREFIX_DELIMITER: Final[str] = "_"
ENV_PREFIX: Final[str] = f"{ENV_PREFIX_NAME}{ENV_PREFIX_DELIMITER}"

URL_ENV: Final[str] = f"{ENV_PREFIX}URL"
USERNAME_ENV: Final[str] = f"{ENV_PREFIX}USERNAME"
PASSWORD_ENV: Final[str] = f"{ENV_PREFIX}PASSWORD"
ENVIRONMENT_ENV: Final[str] = f"{ENV_PREFIX}ENV"
LOGFIRE_TOKEN_ENV: Final[str] = f"{ENV_PREFIX}LOGFIRE_TOKEN"
IGNORE_PRIVATE_IPS_ENV: Final[str] = f"{ENV_PREFIX}IGNORE_PRIVATE_IPS"
OPEN_ONLY_ENV: Final[str] = f"{ENV_PREFIX}OPEN_ONLY"
MINIMUM_SEVERITY_ENV: Final[str] = f"{ENV_PREFIX}MINIMUM_SEVERITY"
SKIP_TLS_VERIFY_ENV: Final[str] = f"{ENV_PREFIX}SKIP_TLS_VERIFY"
MAX_CONCURRENCY_ENV: Final[str] = f"{ENV_PREFIX}MAX_CONCURRENCY"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # Connection; left empty here so option validation can report what is missing
    url: str = Field(
        default="",
        description="QRadar console URL or host name",
        validation_alias=URL_ENV,
    )
    username: str = Field(
        default="",
        description="QRadar user for basic authentication",
        validation_alias=USERNAME_ENV,
    )
    password: str = Field(
        default="",
        description="Password of the QRadar user",
        validation_alias=PASSWORD_ENV,
    )
    skip_tls_verify: bool = Field(
        default=False,
        description="Skip TLS certificate verification (refused in production)",
        validation_alias=SKIP_TLS_VERIFY_ENV,
    )

    # Filters
    ignore_private_ips: bool = Field(
        default=False,
        description="Answer private, loopback and broadcast IPs without querying QRadar",
        validation_alias=IGNORE_PRIVATE_IPS_ENV,
    )
    open_only: bool = Field(
        default=False,
        description="Only report offenses in the OPEN state",
        validation_alias=OPEN_ONLY_ENV,
    )
    minimum_severity: int | None = Field(
        default=None,
        description="Drop offenses with a severity below this value",
        validation_alias=MINIMUM_SEVERITY_ENV,
    )
    max_concurrency: int = Field(
        default=10,
        description="Maximum number of concurrent QRadar requests",
        validation_alias=MAX_CONCURRENCY_ENV,
        ge=1,
        le=100,
    )

    environment: str = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Environment name (e.g., 'development', 'staging', 'production')",
        validation_alias=ENVIRONMENT_ENV,
    )
    logfire_token: str | None = Field(
        default=None,
        description="Optional Pydantic Logfire token for observability",
        validation_alias=LOGFIRE_TOKEN_ENV,
    )

    @field_validator("minimum_severity", mode="before")
    @classmethod
    def empty_severity_is_unset(cls, v: object) -> object:
        """Treat an empty variable as no severity filter."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def lookup_options(self) -> dict[str, object]:
        """Return the settings as a lookup option mapping."""
        return {
            "url": self.url,
            "username": self.username,
            "password": self.password,
            "skipTlsVerify": self.skip_tls_verify,
            "ignorePrivateIps": self.ignore_private_ips,
            "openOnly": self.open_only,
            "minimumSeverity": self.minimum_severity,
            "maxConcurrency": self.max_concurrency,
            "environment": self.environment,
        }

    def model_post_init(self, __context: object, /) -> None:
        """Log configuration after initialization."""
        logger.info("Application configuration loaded")
        logger.info("QRadar URL configured", extra={"url": self.url or None})
        logger.info("Environment configured", extra={"environment": self.environment})
        if self.password:
            logger.info("%sPASSWORD is configured", ENV_PREFIX)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ValidationError: If a setting has an invalid value
    """
    try:
        settings = Settings()
    except Exception:
        logger.critical("Failed to initialize application configuration", exc_info=True)
        raise

    from qradar_lookup.logging_security import register_secret

    register_secret(settings.password)
    return settings
