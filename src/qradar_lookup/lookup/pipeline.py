"""Batch lookup of entities against the QRadar offense API."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, cast

from qradar_lookup.libs.offenses.models import Offense
from qradar_lookup.lookup.entities import Entity, should_skip
from qradar_lookup.lookup.options import LookupOptions
from qradar_lookup.lookup.results import LookupResult, shape_offenses

logger = logging.getLogger(__name__)


class OffenseSearcher(Protocol):
    """Anything that can search offenses by IP, normally an OffenseClient."""

    async def search_offenses(self, ip: str) -> list[Offense]:
        """Return the offenses whose source is ``ip``."""
        ...


class LookupPipeline:
    """Runs the skip, fetch and shape steps for a batch of entities.

    Fetches for different entities run concurrently, at most
    ``options.max_concurrency`` at a time. Results always come back in input
    order. The first QRadar error fails the whole batch and cancels the
    fetches still in flight.
    """

    def __init__(self, client: OffenseSearcher, options: LookupOptions) -> None:
        """Initialize the pipeline.

        Args:
            client: An open offense client (or compatible searcher)
            options: Filter and concurrency options for the batch
        """
        self.client = client
        self.options = options
        self._semaphore = asyncio.Semaphore(options.max_concurrency)

    async def lookup_entity(self, entity: Entity) -> LookupResult:
        """Look up a single entity."""
        if not entity.is_ip:
            logger.debug("Ignoring non-IP entity", extra={"value": entity.value})
            return LookupResult(entity=entity, data=None)

        if should_skip(entity, self.options):
            return LookupResult(entity=entity, data=None)

        async with self._semaphore:
            offenses = await self.client.search_offenses(entity.value)

        return LookupResult(entity=entity, data=shape_offenses(offenses, self.options))

    async def _lookup_into(
        self, results: list[LookupResult | None], index: int, entity: Entity
    ) -> None:
        results[index] = await self.lookup_entity(entity)

    async def lookup(self, entities: Sequence[Entity]) -> list[LookupResult]:
        """Look up every entity of the batch.

        Args:
            entities: Entities in the order the caller wants results back

        Returns:
            One result per entity, in input order

        Raises:
            QRadarError: The first error raised by any fetch of the batch
        """
        logger.debug("Starting lookup batch", extra={"entity_count": len(entities)})
        results: list[LookupResult | None] = [None] * len(entities)
        tasks = [
            asyncio.create_task(self._lookup_into(results, index, entity))
            for index, entity in enumerate(entities)
        ]

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.debug(
            "Lookup batch complete",
            extra={
                "entity_count": len(entities),
                "hit_count": sum(1 for result in results if result and result.data),
            },
        )
        # gather returned normally, so every slot has been written
        return cast(list[LookupResult], results)
