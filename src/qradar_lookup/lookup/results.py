"""Filtering and shaping of offenses into per-entity lookup results."""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from qradar_lookup.libs.offenses.models import Offense
from qradar_lookup.lookup.entities import Entity
from qradar_lookup.lookup.options import LookupOptions

logger = logging.getLogger(__name__)


class OffenseSummary(BaseModel):
    """Offenses for one entity after filtering, plus short display tags."""

    model_config = ConfigDict(frozen=True)

    summary: list[str]
    details: list[Offense]


class LookupResult(BaseModel):
    """The answer for one input entity. ``data`` is None when nothing matched."""

    model_config = ConfigDict(frozen=True)

    entity: Entity
    data: OffenseSummary | None = None


def offense_matches(offense: Offense, options: LookupOptions) -> bool:
    """Check an offense against the open-only and minimum severity filters."""
    if options.open_only and not offense.is_open:
        return False
    if options.minimum_severity is not None and offense.severity < options.minimum_severity:
        return False
    return True


def summary_tags(offenses: Sequence[Offense]) -> list[str]:
    """Build the short tags shown next to an entity, e.g. ``Offenses: 4``."""
    open_count = sum(1 for offense in offenses if offense.is_open)
    return [
        f"Offenses: {len(offenses)}",
        f"Open: {open_count}",
        f"Max Severity: {max(offense.severity for offense in offenses)}",
    ]


def shape_offenses(offenses: Sequence[Offense], options: LookupOptions) -> OffenseSummary | None:
    """Apply the offense filters and shape what is left.

    Args:
        offenses: Offenses returned by QRadar for one entity
        options: Lookup options holding the filter settings

    Returns:
        None when QRadar returned nothing or every offense was filtered out,
        otherwise the summary of the surviving offenses in their original order.
    """
    if not offenses:
        return None

    details = [offense for offense in offenses if offense_matches(offense, options)]
    if not details:
        logger.debug(
            "All offenses filtered out",
            extra={
                "offense_count": len(offenses),
                "open_only": options.open_only,
                "minimum_severity": options.minimum_severity,
            },
        )
        return None

    return OffenseSummary(summary=summary_tags(details), details=details)
