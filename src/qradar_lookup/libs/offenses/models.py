"""Pydantic models for QRadar offenses."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OffenseStatus(str, Enum):
    """Offense lifecycle states reported by QRadar."""

    OPEN = "OPEN"
    HIDDEN = "HIDDEN"
    CLOSED = "CLOSED"


class Offense(BaseModel):
    """A QRadar offense as returned by ``GET /api/siem/offenses``.

    Only ``status`` and ``severity`` are required, the lookup filters depend on
    them. Every other documented field is optional and unknown fields are kept.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: str
    severity: int = Field(..., ge=0)

    id: int | None = None
    description: str | None = None
    magnitude: int | None = None
    credibility: int | None = None
    relevance: int | None = None
    offense_source: str | None = None
    offense_type: int | None = None
    event_count: int | None = None
    flow_count: int | None = None
    source_count: int | None = None
    local_destination_count: int | None = None
    remote_destination_count: int | None = None
    categories: list[str] | None = None
    start_time: int | None = None
    last_updated_time: int | None = None
    close_time: int | None = None
    assigned_to: str | None = None
    follow_up: bool | None = None
    protected: bool | None = None
    inactive: bool | None = None
    domain_id: int | None = None

    @property
    def is_open(self) -> bool:
        """Whether the offense is in the OPEN state."""
        return self.status.upper() == OffenseStatus.OPEN.value
