"""Entity lookups: option validation, private IP guard, filtering and batching."""

from qradar_lookup.lookup.entities import Entity, is_private_ip, should_skip
from qradar_lookup.lookup.options import (
    LookupOptions,
    OptionError,
    flatten_options,
    validate_options,
)
from qradar_lookup.lookup.pipeline import LookupPipeline, OffenseSearcher
from qradar_lookup.lookup.results import LookupResult, OffenseSummary, shape_offenses

__all__ = [
    "Entity",
    "LookupOptions",
    "LookupPipeline",
    "LookupResult",
    "OffenseSearcher",
    "OffenseSummary",
    "OptionError",
    "flatten_options",
    "is_private_ip",
    "shape_offenses",
    "should_skip",
    "validate_options",
]
