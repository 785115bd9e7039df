"""QRadar offense API library."""

from qradar_lookup.libs.offenses.client import OffenseClient
from qradar_lookup.libs.offenses.config import OffenseClientConfig
from qradar_lookup.libs.offenses.exceptions import (
    QRadarAPIError,
    QRadarAuthenticationError,
    QRadarClientError,
    QRadarConfigError,
    QRadarError,
    QRadarMalformedResponseError,
    QRadarNetworkError,
    QRadarNotFoundError,
    QRadarTransientError,
)
from qradar_lookup.libs.offenses.models import Offense, OffenseStatus

__all__ = [
    "Offense",
    "OffenseClient",
    "OffenseClientConfig",
    "OffenseStatus",
    "QRadarAPIError",
    "QRadarAuthenticationError",
    "QRadarClientError",
    "QRadarConfigError",
    "QRadarError",
    "QRadarMalformedResponseError",
    "QRadarNetworkError",
    "QRadarNotFoundError",
    "QRadarTransientError",
]
