"""Rate limiter for outgoing API requests.

OBA servers are shared by every rider in a region, so requests to the same
server are spaced by a minimum delay.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Enforces a minimum delay between requests to one API server.

    Async-safe using asyncio.Lock. A delay of zero disables waiting.
    """

    # Shared limiters keyed by API server base URL
    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}
    _registry_lock: ClassVar[asyncio.Lock | None] = None

    def __init__(self, api_name: str, min_delay_seconds: float = 0.0) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name or base URL of the API (for logging).
            min_delay_seconds: Minimum delay between requests in seconds.
        """
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    async def for_api(cls, api_name: str, min_delay_seconds: float = 0.0) -> ApiRateLimiter:
        """Get the limiter shared by every client of an API server.

        The delay of the first caller wins.
        """
        if cls._registry_lock is None:
            cls._registry_lock = asyncio.Lock()

        async with cls._registry_lock:
            limiter = cls._instances.get(api_name)
            if limiter is None:
                limiter = cls(api_name, min_delay_seconds)
                cls._instances[api_name] = limiter
                logger.info(f"Created rate limiter for {api_name} ({min_delay_seconds}s min delay)")
            return limiter

    @classmethod
    def reset(cls) -> None:
        """Forget every shared limiter."""
        cls._instances.clear()
        cls._registry_lock = None

    async def acquire(self) -> None:
        """Wait until a request to the API is allowed."""
        if self.min_delay_seconds <= 0:
            return

        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.min_delay_seconds - (time.monotonic() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()
