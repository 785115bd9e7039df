"""Tests for entities and the private IP guard."""

from collections.abc import Callable

import pytest

from qradar_lookup.lookup import Entity, LookupOptions, is_private_ip, should_skip


class TestIsPrivateIp:
    """is_private_ip classification."""

    @pytest.mark.parametrize(
        "value",
        [
            "0.0.0.0",
            "255.255.255.255",
            "127.0.0.1",
            "127.255.0.9",
            "10.1.2.3",
            "172.16.0.1",
            "172.31.60.5",
            "192.168.1.10",
            "169.254.10.10",
            "224.0.0.251",
            "239.255.255.250",
            "240.0.0.1",
            "::1",
            "fe80::1",
            "fc00::1",
        ],
    )
    def test_non_routable_addresses(self, value: str) -> None:
        """Test that reserved, private, loopback, link-local and multicast ranges are private."""
        assert is_private_ip(value)

    @pytest.mark.parametrize("value", ["8.8.8.8", "1.1.1.1", "111.111.111.111", "2606:4700::1111"])
    def test_public_addresses(self, value: str) -> None:
        """Test that globally routable addresses are not private."""
        assert not is_private_ip(value)

    @pytest.mark.parametrize("value", ["", "example.com", "999.1.1.1", "10.0.0"])
    def test_non_addresses(self, value: str) -> None:
        """Test that values which are not IPs are never private."""
        assert not is_private_ip(value)


class TestShouldSkip:
    """should_skip decisions."""

    def test_private_ip_skipped_when_ignoring(
        self, options_factory: Callable[..., LookupOptions]
    ) -> None:
        """Test that private IPs are skipped when ignorePrivateIps is set."""
        options = options_factory(ignorePrivateIps=True)

        assert should_skip(Entity(is_ip=True, value="127.0.0.1"), options)

    def test_private_ip_looked_up_by_default(
        self, options_factory: Callable[..., LookupOptions]
    ) -> None:
        """Test that private IPs are looked up unless ignorePrivateIps is set."""
        assert not should_skip(Entity(is_ip=True, value="127.0.0.1"), options_factory())

    def test_public_ip_never_skipped(self, options_factory: Callable[..., LookupOptions]) -> None:
        """Test that public IPs are looked up even when ignoring private IPs."""
        options = options_factory(ignorePrivateIps=True)

        assert not should_skip(Entity(is_ip=True, value="8.8.8.8"), options)


class TestEntity:
    """Entity model behaviour."""

    def test_alias_round_trip(self) -> None:
        """Test that the host's isIP key is accepted and produced."""
        entity = Entity.model_validate({"isIP": True, "value": "10.0.0.1"})

        assert entity.is_ip is True
        assert entity.model_dump(by_alias=True) == {"isIP": True, "value": "10.0.0.1"}

    def test_entities_compare_by_value(self) -> None:
        """Test that equal fields mean equal entities."""
        assert Entity(is_ip=True, value="10.0.0.1") == Entity.model_validate(
            {"isIP": True, "value": "10.0.0.1"}
        )

    @pytest.mark.parametrize(
        ("value", "is_ip"),
        [("10.0.0.1", True), (" 8.8.8.8 ", True), ("::1", True), ("evil.example", False)],
    )
    def test_from_value(self, value: str, is_ip: bool) -> None:
        """Test that from_value flags IP addresses."""
        entity = Entity.from_value(value)

        assert entity.is_ip is is_ip
        assert entity.value == value.strip()
