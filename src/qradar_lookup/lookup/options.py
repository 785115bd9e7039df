"""User options for offense lookups and their validation."""

from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qradar_lookup.libs.offenses.config import OffenseClientConfig
from qradar_lookup.libs.offenses.security import default_environment

URL_REQUIRED_MESSAGE: Final[str] = "You must provide a valid host for the IBM QRadar server."
USERNAME_REQUIRED_MESSAGE: Final[str] = (
    "You must provide a valid username for authentication with the IBM QRadar server."
)
PASSWORD_REQUIRED_MESSAGE: Final[str] = (
    "You must provide a valid password for authentication with the IBM QRadar server."
)

# Checked in this order, which is also the order of the reported errors.
REQUIRED_OPTIONS: Final[tuple[tuple[str, str], ...]] = (
    ("url", URL_REQUIRED_MESSAGE),
    ("username", USERNAME_REQUIRED_MESSAGE),
    ("password", PASSWORD_REQUIRED_MESSAGE),
)


class OptionError(BaseModel):
    """A problem with one user option, shaped for display next to the field."""

    model_config = ConfigDict(frozen=True)

    key: str
    message: str


class LookupOptions(BaseModel):
    """Options for a single lookup batch.

    Accepts both the camelCase keys used by integration hosts and the
    snake_case field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: str
    username: str
    password: str
    ignore_private_ips: bool = Field(default=False, alias="ignorePrivateIps")
    open_only: bool = Field(default=False, alias="openOnly")
    minimum_severity: int | None = Field(default=None, alias="minimumSeverity")
    skip_tls_verify: bool = Field(default=False, alias="skipTlsVerify")
    environment: str = Field(default_factory=default_environment)
    max_concurrency: int = Field(default=10, alias="maxConcurrency", ge=1, le=100)
    max_results: int = Field(default=50, alias="maxResults", ge=1, le=10_000)
    request_timeout: float = Field(default=30.0, alias="requestTimeout", gt=0, le=300)
    max_retries: int = Field(default=3, alias="maxRetries", ge=0, le=10)

    @field_validator("minimum_severity", mode="before")
    @classmethod
    def empty_severity_is_unset(cls, v: object) -> object:
        """Treat an empty form value as "no severity filter"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_client_config(self) -> OffenseClientConfig:
        """Build the connection settings for the offense client."""
        return OffenseClientConfig(
            base_url=self.url,
            username=self.username,
            password=self.password,
            skip_tls_verify=self.skip_tls_verify,
            environment=self.environment,
            http_timeout=self.request_timeout,
            max_retries=self.max_retries,
            max_results=self.max_results,
        )


def flatten_options(options: Mapping[str, object]) -> dict[str, object]:
    """Unwrap host-style ``{"url": {"value": "..."}}`` entries into plain values."""
    flattened: dict[str, object] = {}
    for key, value in options.items():
        if isinstance(value, Mapping) and "value" in value:
            flattened[key] = value["value"]
        else:
            flattened[key] = value
    return flattened


def validate_options(options: Mapping[str, object]) -> list[OptionError]:
    """Check that the connection options are present.

    Every rule is evaluated, so all missing fields are reported at once.

    Args:
        options: Plain or host-style option mapping

    Returns:
        One OptionError per blank or missing field in url, username, password
        order. An empty list means the options are usable.
    """
    flattened = flatten_options(options)
    errors: list[OptionError] = []
    for key, message in REQUIRED_OPTIONS:
        value = flattened.get(key)
        if not isinstance(value, str) or not value.strip():
            errors.append(OptionError(key=key, message=message))
    return errors
