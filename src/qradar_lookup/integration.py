"""Entry points used by integration hosts: startup, option validation and lookups."""

import logging
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from qradar_lookup.libs.offenses import OffenseClient, QRadarConfigError, QRadarError
from qradar_lookup.logging_security import install_filter, register_secret
from qradar_lookup.lookup import (
    Entity,
    LookupOptions,
    LookupPipeline,
    LookupResult,
    OptionError,
    flatten_options,
    validate_options,
)

logger = logging.getLogger(__name__)


class LookupOutcome(BaseModel):
    """Either the ordered results of a batch or the error that stopped it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    results: list[LookupResult] = Field(default_factory=list)
    error: QRadarError | None = None

    @property
    def ok(self) -> bool:
        """Whether the batch completed without error."""
        return self.error is None


class QRadarIntegration:
    """Offense lookups for an integration host.

    The host calls ``startup`` once, ``validate_options`` whenever the user edits
    the settings, and ``do_lookup`` for each batch of entities.
    """

    def __init__(self) -> None:
        """Initialize the integration with the module logger."""
        self.logger = logger

    def startup(self, host_logger: logging.Logger | None = None) -> None:
        """Adopt the host's logger and enable credential redaction.

        Args:
            host_logger: Logger provided by the host, the module logger if None
        """
        if host_logger is not None:
            self.logger = host_logger
        install_filter()
        self.logger.info("QRadar integration started")

    def validate_options(
        self, options: Mapping[str, object]
    ) -> tuple[dict[str, object], list[OptionError]]:
        """Validate user options.

        Args:
            options: Plain or host-style (``{"url": {"value": ...}}``) options

        Returns:
            The flattened options and the list of problems found, empty when valid.
        """
        flattened = flatten_options(options)
        errors = validate_options(flattened)
        if errors:
            self.logger.debug(
                "Options failed validation", extra={"keys": [error.key for error in errors]}
            )
        return flattened, errors

    def _parse_options(self, options: LookupOptions | Mapping[str, object]) -> LookupOptions:
        if isinstance(options, LookupOptions):
            return options

        _, errors = self.validate_options(options)
        if errors:
            raise QRadarConfigError(
                "Invalid lookup options", details="; ".join(error.message for error in errors)
            )
        try:
            return LookupOptions.model_validate(flatten_options(options))
        except ValidationError as e:
            raise QRadarConfigError("Invalid lookup options", details=str(e)) from e

    async def do_lookup(
        self,
        entities: Sequence[Entity | Mapping[str, object]],
        options: LookupOptions | Mapping[str, object],
    ) -> LookupOutcome:
        """Look up a batch of entities.

        Args:
            entities: Entities, or mappings such as ``{"isIP": True, "value": "1.2.3.4"}``
            options: Lookup options or a mapping of them

        Returns:
            A LookupOutcome with one result per entity in input order, or with the
            error that failed the batch.
        """
        try:
            lookup_options = self._parse_options(options)
            batch = [
                entity if isinstance(entity, Entity) else Entity.model_validate(entity)
                for entity in entities
            ]
            register_secret(lookup_options.password)
            client_config = lookup_options.to_client_config()
        except QRadarConfigError as e:
            self.logger.error("Lookup rejected", extra={"error": str(e)})
            return LookupOutcome(error=e)
        except ValidationError as e:
            self.logger.error("Lookup rejected", extra={"error": str(e)})
            return LookupOutcome(error=QRadarConfigError("Invalid lookup request", details=str(e)))

        try:
            async with OffenseClient(client_config) as client:
                results = await LookupPipeline(client, lookup_options).lookup(batch)
        except QRadarError as e:
            self.logger.error(
                "Lookup failed", extra={"entity_count": len(batch), "error": str(e)}
            )
            return LookupOutcome(error=e)

        self.logger.debug("Lookup succeeded", extra={"entity_count": len(batch)})
        return LookupOutcome(results=results)
