"""Protocol for a geohash-partitioned stop cache."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from oba_stop_cache.domain.models.geohash import Geohash
    from oba_stop_cache.domain.models.geohash_cache_difference import GeohashCacheDifference
    from oba_stop_cache.domain.models.stop import Stop
    from oba_stop_cache.domain.models.stop_cache_entry import StopCacheEntry


class StopCacheProtocol(Protocol):
    """Protocol for loading and evicting stops by geohash cell."""

    async def load_stops(self, geohash: "Geohash") -> None:
        """Ensure fresh stops are cached for a geohash.

        Args:
            geohash: The cell to load.
        """
        ...

    async def discard_contents_if_possible(
        self,
    ) -> "GeohashCacheDifference[Geohash, StopCacheEntry]":
        """Discard every cell that is not active.

        Returns:
            The removals performed.
        """
        ...

    async def set_active_geohashes(self, geohashes: "set[Geohash]") -> None:
        """Replace the set of cells protected from discarding.

        Args:
            geohashes: The active cells.
        """
        ...

    async def get_stops(self) -> "list[Stop]":
        """Get all cached stops.

        Returns:
            Stops of every cached cell, flattened.
        """
        ...
