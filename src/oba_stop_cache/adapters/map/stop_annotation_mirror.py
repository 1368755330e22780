"""Delegate that mirrors cached stops as map annotations."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from oba_stop_cache.domain.contracts.stop_cache_delegate import StopCacheDelegateProtocol

if TYPE_CHECKING:
    from oba_stop_cache.domain.contracts.stop_cache import StopCacheProtocol
    from oba_stop_cache.domain.models.geohash import Geohash
    from oba_stop_cache.domain.models.geohash_cache_difference import GeohashCacheDifference
    from oba_stop_cache.domain.models.stop import Stop
    from oba_stop_cache.domain.models.stop_cache_entry import StopCacheEntry

logger = logging.getLogger(__name__)


class StopAnnotationMirror(StopCacheDelegateProtocol):
    """Keeps a stop-id -> stop annotation map in sync with a stop cache.

    Differences are applied incrementally in order. A stop on the border of
    two cells can be returned for both, so annotations are reference counted
    and only removed when no cached cell holds the stop any more.
    """

    def __init__(self) -> None:
        self.annotations: dict[str, Stop] = {}
        self.geohashes: set[Geohash] = set()
        self.update_count = 0
        self._references: Counter[str] = Counter()

    async def cache_did_update(
        self,
        cache: StopCacheProtocol,  # noqa: ARG002
        difference: GeohashCacheDifference[Geohash, StopCacheEntry],
    ) -> None:
        """Apply a cache difference to the annotations."""
        self.apply(difference)

    def apply(self, difference: GeohashCacheDifference[Geohash, StopCacheEntry]) -> None:
        """Apply key and element changes in sequence."""
        self.update_count += 1

        for key_change in difference.key_changes:
            if key_change.is_insertion:
                self.geohashes.add(key_change.value)
            else:
                self.geohashes.discard(key_change.value)

        for element_change in difference.element_changes:
            if element_change.is_insertion:
                self._add_stops(element_change.value.stops)
            else:
                self._remove_stops(element_change.value.stops)

        logger.debug(
            f"Applied cache update #{self.update_count}: {len(self.annotations)} annotation(s) "
            f"across {len(self.geohashes)} geohash(es)"
        )

    def _add_stops(self, stops: tuple[Stop, ...]) -> None:
        for stop in stops:
            self._references[stop.id] += 1
            self.annotations[stop.id] = stop

    def _remove_stops(self, stops: tuple[Stop, ...]) -> None:
        for stop in stops:
            self._references[stop.id] -= 1
            if self._references[stop.id] <= 0:
                del self._references[stop.id]
                self.annotations.pop(stop.id, None)
