"""Shared fixtures: a mocked QRadar offense API and matching lookup options."""

import os
import re
from collections.abc import Callable, Generator

import httpx
import pytest
import respx

from qradar_lookup.config import ENV_PREFIX
from qradar_lookup.libs.offenses.config import OffenseClientConfig
from qradar_lookup.lookup import LookupOptions

QRADAR_URL = "https://localhost:5555"
OFFENSES_URL = f"{QRADAR_URL}/api/siem/offenses"

# IP whose offenses come back as a corrupted body
CORRUPTED_IP = "1.1.1.1"
# IP with five offenses: one open, four with severity >= 6
MIXED_IP = "111.111.111.111"
# IP with a single open offense
SINGLE_IP = "172.31.60.5"

_OFFENSE_SOURCE = re.compile(r'offense_source="(?P<ip>[^"]+)"')


def make_offense(offense_id: int, status: str, severity: int, source: str) -> dict[str, object]:
    """Build an offense record shaped like the QRadar API response."""
    return {
        "id": offense_id,
        "description": f"Offense {offense_id} for {source}",
        "status": status,
        "severity": severity,
        "magnitude": max(severity - 1, 1),
        "credibility": 3,
        "relevance": 4,
        "offense_source": source,
        "offense_type": 0,
        "event_count": 10 * offense_id,
        "flow_count": 0,
        "categories": ["Suspicious Activity"],
        "start_time": 1_700_000_000_000 + offense_id,
        "last_updated_time": 1_700_000_500_000 + offense_id,
        "follow_up": False,
        "protected": False,
        "domain_id": 0,
    }


OFFENSES_BY_IP: dict[str, list[dict[str, object]]] = {
    MIXED_IP: [
        make_offense(1, "OPEN", 8, MIXED_IP),
        make_offense(2, "CLOSED", 3, MIXED_IP),
        make_offense(3, "HIDDEN", 6, MIXED_IP),
        make_offense(4, "CLOSED", 7, MIXED_IP),
        make_offense(5, "CLOSED", 10, MIXED_IP),
    ],
    SINGLE_IP: [make_offense(42, "OPEN", 5, SINGLE_IP)],
}


def offense_source(request: httpx.Request) -> str:
    """Extract the IP from the ``filter`` query parameter of a search request."""
    match = _OFFENSE_SOURCE.search(request.url.params.get("filter", ""))
    assert match is not None, "search request is missing the offense_source filter"
    return match.group("ip")


def fake_qradar(request: httpx.Request) -> httpx.Response:
    """Answer offense searches from OFFENSES_BY_IP; unknown IPs have no offenses."""
    ip = offense_source(request)
    if ip == CORRUPTED_IP:
        return httpx.Response(
            200, text='[{"id": 1, "status": "OPEN", "sev', headers={"content-type": "application/json"}
        )
    return httpx.Response(200, json=OFFENSES_BY_IP.get(ip, []))


@pytest.fixture
def qradar_mock() -> Generator[respx.MockRouter, None, None]:
    """Mock router for the QRadar console; routes need not all be called."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def offenses_route(qradar_mock: respx.MockRouter) -> respx.Route:
    """Route serving the fixture offenses for every search."""
    return qradar_mock.get(OFFENSES_URL).mock(side_effect=fake_qradar)


@pytest.fixture
def options_factory() -> Callable[..., LookupOptions]:
    """Factory for lookup options pointing at the mocked console.

    Retries are disabled so that error tests finish immediately.
    """

    def _create(**overrides: object) -> LookupOptions:
        values: dict[str, object] = {
            "url": QRADAR_URL,
            "username": "mocha",
            "password": "mocha-password",
            "environment": "test",
            "maxRetries": 0,
        }
        values.update(overrides)
        return LookupOptions.model_validate(values)

    return _create


@pytest.fixture
def client_config() -> OffenseClientConfig:
    """Client configuration for the mocked console."""
    return OffenseClientConfig(
        base_url=QRADAR_URL,
        username="mocha",
        password="test",
        environment="test",
        max_retries=0,
    )


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove QRADARLOOKUP_* variables for the test and restore them afterwards."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_lru_cache() -> Generator[None, None, None]:
    """Reset cached settings between tests."""
    yield

    from qradar_lookup.config import get_settings

    get_settings.cache_clear()
