"""Tests for lookup option validation."""

import copy

import pytest
from pydantic import ValidationError

from qradar_lookup.lookup.options import (
    PASSWORD_REQUIRED_MESSAGE,
    URL_REQUIRED_MESSAGE,
    USERNAME_REQUIRED_MESSAGE,
    LookupOptions,
    flatten_options,
    validate_options,
)


def host_options(url: str, username: str, password: str) -> dict[str, object]:
    """Options wrapped the way integration hosts send them."""
    return {
        "url": {"value": url},
        "username": {"value": username},
        "password": {"value": password},
    }


class TestValidateOptions:
    """validate_options error collection."""

    def test_valid_options(self) -> None:
        """Test that complete options produce no errors."""
        assert validate_options(host_options("google.com", "mocha", "test")) == []

    def test_missing_url(self) -> None:
        """Test the error reported for an empty url."""
        errors = validate_options(host_options("", "mocha", "test"))

        assert [error.model_dump() for error in errors] == [
            {
                "key": "url",
                "message": "You must provide a valid host for the IBM QRadar server.",
            }
        ]

    def test_missing_username(self) -> None:
        """Test the error reported for an empty username."""
        errors = validate_options(host_options("google.com", "", "test"))

        assert [error.model_dump() for error in errors] == [
            {
                "key": "username",
                "message": "You must provide a valid username for authentication with the "
                "IBM QRadar server.",
            }
        ]

    def test_missing_password(self) -> None:
        """Test the error reported for an empty password."""
        errors = validate_options(host_options("google.com", "mocha", ""))

        assert [error.model_dump() for error in errors] == [
            {
                "key": "password",
                "message": "You must provide a valid password for authentication with the "
                "IBM QRadar server.",
            }
        ]

    def test_collects_multiple_errors_in_order(self) -> None:
        """Test that username and password errors are both reported, username first."""
        errors = validate_options(host_options("google.com", "", ""))

        assert [error.key for error in errors] == ["username", "password"]
        assert [error.message for error in errors] == [
            USERNAME_REQUIRED_MESSAGE,
            PASSWORD_REQUIRED_MESSAGE,
        ]

    def test_all_missing_reports_declaration_order(self) -> None:
        """Test that url, username and password errors come in that order."""
        errors = validate_options({})

        assert [error.key for error in errors] == ["url", "username", "password"]
        assert errors[0].message == URL_REQUIRED_MESSAGE

    def test_blank_values_are_missing(self) -> None:
        """Test that whitespace-only and non-string values count as missing."""
        errors = validate_options({"url": "   ", "username": None, "password": 123})

        assert [error.key for error in errors] == ["url", "username", "password"]

    def test_plain_mapping_is_accepted(self) -> None:
        """Test that unwrapped options validate the same way."""
        assert validate_options({"url": "google.com", "username": "mocha", "password": "t"}) == []

    def test_does_not_modify_input(self) -> None:
        """Test that validation leaves the caller's mapping untouched."""
        options = host_options("", "mocha", "test")
        snapshot = copy.deepcopy(options)

        validate_options(options)

        assert options == snapshot


class TestFlattenOptions:
    """flatten_options unwrapping."""

    def test_unwraps_value_entries(self) -> None:
        """Test that {"value": x} wrappers are replaced by x."""
        flattened = flatten_options(
            {"url": {"value": "google.com"}, "openOnly": {"value": True}, "minimumSeverity": 4}
        )

        assert flattened == {"url": "google.com", "openOnly": True, "minimumSeverity": 4}

    def test_keeps_mappings_without_value_key(self) -> None:
        """Test that other mappings are passed through unchanged."""
        assert flatten_options({"extra": {"a": 1}}) == {"extra": {"a": 1}}


class TestLookupOptions:
    """LookupOptions parsing."""

    def test_camel_case_aliases(self) -> None:
        """Test that host-style camelCase keys populate the fields."""
        options = LookupOptions.model_validate(
            {
                "url": "https://localhost:5555",
                "username": "mocha",
                "password": "test",
                "ignorePrivateIps": True,
                "openOnly": True,
                "minimumSeverity": 6,
            }
        )

        assert options.ignore_private_ips is True
        assert options.open_only is True
        assert options.minimum_severity == 6

    def test_defaults(self) -> None:
        """Test that filters are off by default."""
        options = LookupOptions(url="https://localhost:5555", username="mocha", password="test")

        assert options.ignore_private_ips is False
        assert options.open_only is False
        assert options.minimum_severity is None
        assert options.skip_tls_verify is False
        assert options.max_concurrency == 10

    def test_empty_minimum_severity_is_unset(self) -> None:
        """Test that an empty string disables the severity filter."""
        options = LookupOptions.model_validate(
            {"url": "x", "username": "u", "password": "p", "minimumSeverity": ""}
        )

        assert options.minimum_severity is None

    def test_numeric_string_severity_is_coerced(self) -> None:
        """Test that form values such as "6" are accepted."""
        options = LookupOptions.model_validate(
            {"url": "x", "username": "u", "password": "p", "minimumSeverity": "6"}
        )

        assert options.minimum_severity == 6

    def test_options_are_immutable(self) -> None:
        """Test that options cannot be changed after creation."""
        options = LookupOptions(url="x", username="u", password="p")

        with pytest.raises(ValidationError):
            options.open_only = True  # type: ignore[misc]

    def test_to_client_config(self) -> None:
        """Test the mapping onto the client configuration."""
        options = LookupOptions.model_validate(
            {
                "url": "localhost:5555",
                "username": "mocha",
                "password": "test",
                "environment": "test",
                "maxResults": 10,
                "requestTimeout": 5,
                "maxRetries": 1,
            }
        )

        config = options.to_client_config()

        assert config.base_url == "https://localhost:5555"
        assert config.username == "mocha"
        assert config.password == "test"
        assert config.max_results == 10
        assert config.http_timeout == 5
        assert config.max_retries == 1
        assert config.skip_tls_verify is False
