"""Configuration for the QRadar offense client."""

import logging
from typing import Final

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from typing_extensions import Self

from qradar_lookup.libs.offenses.security import default_environment, validate_tls_bypass

logger = logging.getLogger(__name__)

OFFENSES_API_PATH: Final[str] = "/api/siem/offenses"
DEFAULT_API_VERSION: Final[str] = "12.0"


class _ProgrammaticSettings(BaseSettings):
    """Base class to disable environment variable loading for settings."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Disable all settings sources except for programmatic initialization."""
        return (init_settings,)


class OffenseClientConfig(_ProgrammaticSettings):
    """Connection settings for the QRadar offense API."""

    model_config = SettingsConfigDict(validate_assignment=True)

    base_url: str = Field(
        ...,
        description="QRadar console URL. A bare host name is treated as https://<host>.",
    )
    api_endpoint: str = Field(
        default=OFFENSES_API_PATH,
        description="API path of the offense collection.",
    )
    username: str = Field(..., description="QRadar user for HTTP basic authentication.")
    password: str = Field(..., description="Password of the QRadar user.")
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        description="Value of the QRadar 'Version' request header.",
    )
    skip_tls_verify: bool = Field(
        default=False,
        description="Skip TLS certificate verification (never allowed in production).",
    )
    environment: str = Field(
        default_factory=default_environment,
        description="Environment name used to decide whether TLS bypass is permitted.",
    )
    http_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds.",
        gt=0,
        le=300,
    )
    max_retries: int = Field(
        default=3,
        description="Retries for timeouts, network errors and 502/503/504 responses.",
        ge=0,
        le=10,
    )
    max_results: int = Field(
        default=50,
        description="Maximum number of offenses requested per IP (QRadar Range header).",
        ge=1,
        le=10_000,
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Normalize base_url to an HTTPS origin without trailing slashes.

        Raises:
            ValueError: If base_url is empty or uses plain HTTP
        """
        v = v.strip()
        if not v:
            raise ValueError("base_url cannot be empty")

        if v.startswith("http://"):
            raise ValueError("base_url must use HTTPS protocol")

        if not v.startswith("https://"):
            v = f"https://{v}"

        return v.rstrip("/")

    @field_validator("api_endpoint")
    @classmethod
    def validate_api_endpoint(cls, v: str) -> str:
        """Ensure api_endpoint has exactly one leading slash and no trailing slash."""
        if not v:
            raise ValueError("api_endpoint cannot be empty")
        return "/" + v.strip("/")

    @field_validator("username", "password")
    @classmethod
    def validate_credentials(cls, v: str) -> str:
        """Reject blank credentials."""
        if not v or not v.strip():
            raise ValueError("credentials cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_tls(self) -> Self:
        """Refuse TLS bypass in production and log the effective TLS setting."""
        validate_tls_bypass(self.skip_tls_verify, self.base_url, self.environment)
        logger.debug(
            "QRadar client configuration validated",
            extra={"base_url": self.base_url, "tls_verify": not self.skip_tls_verify},
        )
        return self

    @property
    def full_url(self) -> str:
        """Get the full URL of the offense collection."""
        return f"{self.base_url}{self.api_endpoint}"

    @property
    def range_header(self) -> str:
        """Value of the Range header limiting the number of returned offenses."""
        return f"items=0-{self.max_results - 1}"
