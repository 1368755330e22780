"""Geohash-partitioned stop cache in front of the stops API."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, ClassVar

from oba_stop_cache.application.geohash_cache import GeohashCache
from oba_stop_cache.domain.contracts.stop_cache import StopCacheProtocol
from oba_stop_cache.domain.models.errors import ServiceUnavailableError, StopLimitExceededError
from oba_stop_cache.domain.models.stop_cache_entry import StopCacheEntry

if TYPE_CHECKING:
    from oba_stop_cache.domain.contracts.api_service_provider import ApiServiceProviderProtocol
    from oba_stop_cache.domain.contracts.stop_cache_delegate import StopCacheDelegateProtocol
    from oba_stop_cache.domain.models.geohash import Geohash
    from oba_stop_cache.domain.models.geohash_cache_difference import GeohashCacheDifference
    from oba_stop_cache.domain.models.stop import Stop

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class StopCache(StopCacheProtocol):
    """Caches stops per geohash cell and keeps them fresh.

    All access to the underlying ``GeohashCache`` happens under a single
    ``asyncio.Lock`` and never awaits while holding it, so mutations and
    reads cannot interleave. Network fetches run outside the lock and are
    fully concurrent across cells; concurrent misses for the same cell share
    one fetch.

    Delegate notifications are queued and delivered by a background task in
    the order the differences were produced.
    """

    # Precision 6 yields cells of approximately 1.22km x 0.61km
    DEFAULT_GEOHASH_PRECISION: ClassVar[int] = 6
    DEFAULT_EXPIRATION: ClassVar[timedelta] = timedelta(minutes=60)

    def __init__(
        self,
        api_service_provider: ApiServiceProviderProtocol | None,
        delegate: StopCacheDelegateProtocol | None = None,
        geohash_precision: int | None = None,
        expiration: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the stop cache.

        Args:
            api_service_provider: Provider of the stops API service. May be
                None, or later cleared, in which case loads fail with
                ServiceUnavailableError.
            delegate: Optional receiver of cache differences.
            geohash_precision: Required precision of active geohashes.
                Defaults to DEFAULT_GEOHASH_PRECISION.
            expiration: Age at which an entry is refetched. Defaults to
                DEFAULT_EXPIRATION.
            clock: Returns the current time; used for entry timestamps and
                expiration checks.
        """
        self.api_service_provider = api_service_provider
        self.delegate = delegate
        self.geohash_precision = geohash_precision or self.DEFAULT_GEOHASH_PRECISION
        self.expiration = expiration if expiration is not None else self.DEFAULT_EXPIRATION
        self._clock = clock or _utc_now

        self._cache: GeohashCache[StopCacheEntry] = GeohashCache(
            expected_precision=self.geohash_precision
        )
        self._lock = asyncio.Lock()
        self._in_flight: dict[Geohash, asyncio.Task[None]] = {}
        self._notifications: asyncio.Queue[
            tuple[StopCacheDelegateProtocol, GeohashCacheDifference[Geohash, StopCacheEntry]]
        ] = asyncio.Queue()
        self._notifier_task: asyncio.Task[None] | None = None

    async def __aenter__(self) -> StopCache:
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        await self.close()

    # Reads

    async def get_stops(self) -> list[Stop]:
        """Get the stops of every cached cell, flattened.

        Recomputed on every call.
        """
        async with self._lock:
            return [stop for entry in self._cache.elements for stop in entry.stops]

    async def get_entry(self, geohash: Geohash) -> StopCacheEntry | None:
        """Get the cached entry for a geohash, fresh or not."""
        async with self._lock:
            return self._cache[geohash]

    async def get_geohashes(self) -> set[Geohash]:
        """Get all cached geohashes."""
        async with self._lock:
            return self._cache.geohashes

    async def get_active_geohashes(self) -> frozenset[Geohash]:
        """Get the geohashes currently protected from discarding."""
        async with self._lock:
            return self._cache.active_geohashes

    # Loading

    async def load_stops(self, geohash: Geohash) -> None:
        """Ensure fresh stops are cached for a geohash.

        Returns immediately on a fresh cache hit. Stale hits and misses are
        fetched from the API service and upserted.

        Raises:
            ServiceUnavailableError: If no API service is available.
            StopLimitExceededError: If the server truncated the result.
            Exception: Any error raised by the API service, unchanged.
        """
        logging_id = uuid.uuid4()

        def log_trace(message: str) -> None:
            logger.debug(f"[{logging_id}] - [{geohash}]: {message}")

        log_trace("Load stops begin")
        try:
            async with self._lock:
                existing_entry = self._cache[geohash]
                if existing_entry is not None:
                    log_trace("Cache hit")
                    if not existing_entry.is_expired(self._clock(), self.expiration):
                        log_trace("Cache still fresh")
                        return
                    log_trace("Cache stale")
                else:
                    log_trace("Cache miss")

                task = self._in_flight.get(geohash)
                if task is None or task.done():
                    task = asyncio.create_task(self._fetch_and_store(geohash))
                    task.add_done_callback(lambda t: self._finish_fetch(geohash, t))
                    self._in_flight[geohash] = task
                else:
                    log_trace("Joining in-flight fetch")

            # Cancelling this caller must not cancel the fetch other callers share
            await asyncio.shield(task)
        finally:
            log_trace("Load stops finished")

    async def _fetch_and_store(self, geohash: Geohash) -> None:
        provider = self.api_service_provider
        api_service = provider.api_service if provider is not None else None
        if api_service is None:
            raise ServiceUnavailableError()

        response = await api_service.get_stops_in_region(geohash.region)

        if response.limit_exceeded:
            # TODO: subdivide into geohashes of precision + 1 and load those instead
            logger.warning(
                f"Stop limit exceeded for geohash {geohash} ({len(response.stops)} stops returned)"
            )
            raise StopLimitExceededError(geohash, len(response.stops))

        async with self._lock:
            entry = StopCacheEntry.from_response(geohash, response, created_at=self._clock())
            difference = self._cache.upsert(geohash, entry)
            self._enqueue_notification(difference)

        logger.debug(f"Cached {len(entry.stops)} stop(s) for geohash {geohash}")

    def _finish_fetch(self, geohash: Geohash, task: asyncio.Task[None]) -> None:
        if self._in_flight.get(geohash) is task:
            del self._in_flight[geohash]
        # Mark the result as retrieved in case every waiter was cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Fetch for geohash {geohash} failed: {task.exception()!r}")

    # Mutations

    async def discard_contents_if_possible(self) -> GeohashCacheDifference[Geohash, StopCacheEntry]:
        """Discard every cell that is not active and notify the delegate."""
        async with self._lock:
            logger.debug(f"Discarding content... (current size: {len(self._cache)})")
            difference = self._cache.discard_content_if_possible()
            self._enqueue_notification(difference)
            logger.debug(f"Finished discarding content. (new size: {len(self._cache)})")
        return difference

    async def set_active_geohashes(self, geohashes: Iterable[Geohash]) -> None:
        """Replace the set of cells protected from discarding.

        Every geohash must have ``geohash_precision``. This is asserted in
        debug runs only; optimized runs trust the caller.
        """
        active = set(geohashes)
        async with self._lock:
            self._cache.active_geohashes = active
        logger.debug(f"New active geohash(es): {sorted(str(g) for g in active)}")

    # Delegate notifications

    def _enqueue_notification(
        self, difference: GeohashCacheDifference[Geohash, StopCacheEntry]
    ) -> None:
        delegate = self.delegate
        if delegate is None:
            return

        self._notifications.put_nowait((delegate, difference))
        if self._notifier_task is None or self._notifier_task.done():
            self._notifier_task = asyncio.create_task(self._notify_loop())

    async def _notify_loop(self) -> None:
        while True:
            delegate, difference = await self._notifications.get()
            try:
                await delegate.cache_did_update(self, difference)
            except Exception as e:
                logger.error(f"Stop cache delegate failed to process update: {e}")
            finally:
                self._notifications.task_done()

    async def wait_for_notifications(self) -> None:
        """Wait until every queued delegate notification has been delivered."""
        await self._notifications.join()

    async def close(self) -> None:
        """Cancel in-flight fetches, deliver pending notifications, stop the notifier."""
        for task in list(self._in_flight.values()):
            task.cancel()
        self._in_flight.clear()

        if self._notifier_task is not None and not self._notifier_task.done():
            await self._notifications.join()
            self._notifier_task.cancel()
            try:
                await self._notifier_task
            except asyncio.CancelledError:
                logger.debug("Stop cache notifier stopped")
        self._notifier_task = None
