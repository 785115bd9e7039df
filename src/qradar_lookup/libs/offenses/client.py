"""REST client for the QRadar offense API."""

import logging
from http import HTTPStatus
from types import TracebackType

import httpx
import tenacity
from pydantic import ValidationError
from typing_extensions import Self

from qradar_lookup.libs.offenses.config import OffenseClientConfig
from qradar_lookup.libs.offenses.exceptions import (
    QRadarAPIError,
    QRadarAuthenticationError,
    QRadarMalformedResponseError,
    QRadarNetworkError,
    QRadarNotFoundError,
    QRadarTransientError,
)
from qradar_lookup.libs.offenses.models import Offense
from qradar_lookup.user_agent import get_user_agent

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = (
    HTTPStatus.BAD_GATEWAY,
    HTTPStatus.SERVICE_UNAVAILABLE,
    HTTPStatus.GATEWAY_TIMEOUT,
)


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull the human readable message out of a QRadar error body."""
    try:
        error_data = response.json()
    except ValueError:
        return response.text or default
    if not isinstance(error_data, dict):
        return default
    return str(
        error_data.get("message")
        or error_data.get("description")
        or error_data.get("error")
        or default
    )


class OffenseClient:
    """Client for searching QRadar offenses by source IP.

    The client owns one ``httpx.AsyncClient`` for its lifetime and must be used
    as an async context manager:

        async with OffenseClient(config) as client:
            offenses = await client.search_offenses("10.0.0.1")

    Every concurrent search issued inside the block shares that connection pool.
    """

    def __init__(self, config: OffenseClientConfig) -> None:
        """Initialize the offense client.

        Args:
            config: Connection settings for the QRadar console
        """
        self.config = config
        self._client: httpx.AsyncClient | None = None
        self.retry_policy = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception_type(
                (httpx.TimeoutException, httpx.NetworkError, QRadarTransientError)
            ),
            stop=tenacity.stop_after_attempt(config.max_retries + 1),
            wait=tenacity.wait_exponential(multiplier=0.1, max=5.0) + tenacity.wait_random(0, 1.0),
            reraise=True,
        )
        logger.debug(
            "Initialized offense client",
            extra={"base_url": config.base_url, "api_endpoint": config.api_endpoint},
        )

    async def __aenter__(self) -> Self:
        """Open the HTTP connection pool."""
        if self.config.skip_tls_verify:
            logger.critical(
                "Opening QRadar connection with TLS verification DISABLED",
                extra={"base_url": self.config.base_url, "environment": self.config.environment},
            )
        self._client = httpx.AsyncClient(
            auth=httpx.BasicAuth(self.config.username, self.config.password),
            headers={
                "Accept": "application/json",
                "Version": self.config.api_version,
                "User-Agent": get_user_agent(),
            },
            timeout=httpx.Timeout(self.config.http_timeout),
            verify=not self.config.skip_tls_verify,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the HTTP connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("HTTP client connection closed")

    async def _get_with_retry(self, params: dict[str, str]) -> httpx.Response:
        """Execute the GET request, retrying timeouts, network errors and 5xx gateway errors.

        Raises:
            httpx.TimeoutException: If every attempt timed out.
            httpx.NetworkError: If every attempt failed at the network level.
            QRadarTransientError: If every attempt returned 502, 503 or 504.
        """
        if not self._client:
            raise QRadarAPIError("Client not initialized. Use async context manager.")

        # copy() gives each concurrent search its own attempt state
        async for attempt in self.retry_policy.copy():
            with attempt:
                response = await self._client.get(
                    self.config.full_url,
                    params=params,
                    headers={"Range": self.config.range_header},
                )
                if response.status_code in TRANSIENT_STATUS_CODES:
                    logger.warning(
                        "Transient server error, will retry",
                        extra={"status_code": response.status_code},
                    )
                    raise QRadarTransientError(
                        _error_message(response, "Transient server error"),
                        status_code=response.status_code,
                    )
        return response

    async def search_offenses(self, ip: str) -> list[Offense]:
        """Return the offenses whose offense source is ``ip``.

        Args:
            ip: IP address to search for

        Returns:
            The offenses QRadar reports for the address, possibly empty

        Raises:
            QRadarAuthenticationError: If the credentials are rejected
            QRadarNotFoundError: If the offense endpoint does not exist
            QRadarMalformedResponseError: If the response body is not a list of offenses
            QRadarAPIError: If the API returns any other error
            QRadarNetworkError: If the server cannot be reached
        """
        if not self._client:
            raise QRadarAPIError("Client not initialized. Use async context manager.")

        params = {"filter": f'offense_source="{ip}"'}
        logger.debug("Searching offenses", extra={"ip": ip, "endpoint": self.config.full_url})

        try:
            response = await self._get_with_retry(params)
        except httpx.TimeoutException as e:
            logger.exception("Timeout searching offenses", extra={"ip": ip})
            raise QRadarNetworkError(f"Request timeout: {e}") from e
        except (httpx.NetworkError, httpx.RequestError) as e:
            logger.exception("Network error searching offenses", extra={"ip": ip})
            raise QRadarNetworkError(f"Network error: {e}") from e
        except QRadarTransientError as e:
            logger.exception("Transient server error persisted after retries", extra={"ip": ip})
            raise QRadarAPIError(
                f"Server returned transient error after multiple retries: {e.message}",
                status_code=e.status_code,
            ) from e

        logger.debug(
            "Received response for search_offenses",
            extra={"status_code": response.status_code, "ip": ip},
        )
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> list[Offense]:
        """Convert an HTTP response into offenses or raise the matching error."""
        if response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            logger.error("Authentication failed", extra={"status_code": response.status_code})
            raise QRadarAuthenticationError(
                "Authentication failed", status_code=response.status_code
            )

        if response.status_code == HTTPStatus.NOT_FOUND:
            logger.warning("Offense endpoint not found", extra={"url": str(response.url)})
            raise QRadarNotFoundError(
                "QRadar offense endpoint not found", status_code=response.status_code
            )

        if response.status_code >= 400:
            error_message = _error_message(response, "Unknown error")
            logger.error(
                "API error",
                extra={"status_code": response.status_code, "error": error_message},
            )
            raise QRadarAPIError(
                f"API error: {error_message}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "Offense response is not valid JSON", extra={"response": response.text[:200]}
            )
            raise QRadarMalformedResponseError(
                "Failed to parse offense response", details=str(e)
            ) from e

        if not isinstance(data, list):
            logger.error(
                "Offense response is not a list", extra={"type": type(data).__name__}
            )
            raise QRadarMalformedResponseError(
                "Unexpected offense response format",
                details=f"expected a JSON array, got {type(data).__name__}",
            )

        try:
            offenses = [Offense.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error("Failed to validate offense records", exc_info=e)
            raise QRadarMalformedResponseError(
                "Failed to validate offense records", details=str(e)
            ) from e

        logger.debug("Parsed offenses", extra={"offense_count": len(offenses)})
        return offenses
