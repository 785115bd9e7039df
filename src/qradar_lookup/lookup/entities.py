"""Lookup entities and the pre-lookup private address guard."""

import ipaddress
import logging

from pydantic import BaseModel, ConfigDict, Field

from qradar_lookup.lookup.options import LookupOptions

logger = logging.getLogger(__name__)


class Entity(BaseModel):
    """A single indicator submitted for lookup."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_ip: bool = Field(default=False, alias="isIP")
    value: str

    @classmethod
    def from_value(cls, value: str) -> "Entity":
        """Build an entity from a raw string, flagging it as an IP when it parses as one."""
        value = value.strip()
        try:
            ipaddress.ip_address(value)
        except ValueError:
            return cls(is_ip=False, value=value)
        return cls(is_ip=True, value=value)


def is_private_ip(value: str) -> bool:
    """Check whether ``value`` is an address that is not globally routable.

    Covers RFC 1918 ranges, loopback, link-local, multicast, reserved ranges,
    the unspecified address ``0.0.0.0`` and the limited broadcast address
    ``255.255.255.255``. IPv6 addresses are classified the same way.

    Args:
        value: Address string to classify

    Returns:
        True for non-routable addresses, False for public addresses and for
        strings that are not IP addresses at all.
    """
    try:
        ip = ipaddress.ip_address(value.strip())
    except ValueError:
        return False

    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_unspecified
    )


def should_skip(entity: Entity, options: LookupOptions) -> bool:
    """Decide whether a private address should be answered without querying QRadar."""
    if options.ignore_private_ips and is_private_ip(entity.value):
        logger.debug("Skipping private IP", extra={"ip": entity.value})
        return True
    return False
