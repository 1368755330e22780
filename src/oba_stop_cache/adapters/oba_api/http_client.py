"""HTTP client for OneBusAway REST API requests."""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from oba_stop_cache.adapters.api_rate_limiter import ApiRateLimiter
from oba_stop_cache.adapters.api_request_logger import log_api_request
from oba_stop_cache.adapters.oba_api.constants import DEFAULT_HEADERS, OBA_SUCCESS_CODE
from oba_stop_cache.domain.models.error_details import ErrorDetails
from oba_stop_cache.domain.models.errors import ObaApiError, ObaDecodeError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


class ObaHttpClient:
    """HTTP client for one OBA REST API server.

    Errors are raised, never swallowed: callers decide about retries.
    """

    def __init__(
        self,
        session: "ClientSession",
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10,
        min_delay_seconds: float = 0.0,
    ) -> None:
        """Initialize the client.

        Args:
            session: aiohttp session owned by the caller.
            base_url: Server base URL, e.g. https://api.pugetsound.onebusaway.org.
            api_key: Value of the 'key' query parameter.
            timeout_seconds: Total timeout per request.
            min_delay_seconds: Minimum delay between requests to this server.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._min_delay_seconds = min_delay_seconds
        self._rate_limiter: ApiRateLimiter | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_rate_limiter(self) -> ApiRateLimiter:
        """Get the rate limiter shared by all clients of this server."""
        if self._rate_limiter is None:
            self._rate_limiter = await ApiRateLimiter.for_api(
                self._base_url, self._min_delay_seconds
            )
        return self._rate_limiter

    async def _raise_for_status(self, response: "ClientResponse", url: str) -> None:
        """Raise ObaApiError for any non-200 HTTP status."""
        if response.status == 200:
            return

        error_text = await response.text()
        body = error_text[:500] if error_text else "(empty response body)"
        details = ErrorDetails.from_status(response.status)
        retry_after = response.headers.get("Retry-After")
        extra_info = f" [Retry-After: {retry_after}]" if retry_after else ""
        logger.error(f"OBA API returned status {response.status} for {url}: {body}{extra_info}")
        raise ObaApiError(details, url, body)

    async def _decode_json(self, response: "ClientResponse", url: str) -> dict[str, Any]:
        try:
            payload = await response.json(content_type=None)
        except ValueError as e:
            raise ObaDecodeError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise ObaDecodeError(f"Expected a JSON object from {url}, got {type(payload).__name__}")
        return payload

    @staticmethod
    def _check_envelope(payload: dict[str, Any], url: str) -> None:
        """Raise ObaApiError when the envelope reports a failure despite HTTP 200."""
        code = payload.get("code")
        if code is None or code == OBA_SUCCESS_CODE:
            return

        text = payload.get("text")
        fallback = ErrorDetails.from_status(code if isinstance(code, int) else None)
        details = ErrorDetails(status_code=fallback.status_code, reason=text or fallback.reason)
        logger.error(f"OBA API envelope reported code {code} for {url}: {details.reason}")
        raise ObaApiError(details, url)

    async def get_json(self, path: str, params: dict[str, str | int | float]) -> dict[str, Any]:
        """Perform a GET request and return the decoded response envelope.

        Raises:
            ObaApiError: On a non-200 HTTP status or envelope code.
            ObaDecodeError: If the body is not a JSON object.
            aiohttp.ClientError: On transport failures.
            asyncio.TimeoutError: If the request times out.
        """
        url = f"{self._base_url}{path}"
        query: dict[str, str | int | float] = {**params, "key": self._api_key}
        log_api_request("GET", url, params=query, headers=DEFAULT_HEADERS)

        rate_limiter = await self._get_rate_limiter()
        await rate_limiter.acquire()

        async with self._session.get(
            url, params=query, headers=DEFAULT_HEADERS, timeout=self._timeout
        ) as response:
            await self._raise_for_status(response, url)
            payload = await self._decode_json(response, url)

        self._check_envelope(payload, url)
        return payload
