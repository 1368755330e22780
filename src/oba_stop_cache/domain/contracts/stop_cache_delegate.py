"""Protocol for receiving stop cache updates."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from oba_stop_cache.domain.contracts.stop_cache import StopCacheProtocol
    from oba_stop_cache.domain.models.geohash import Geohash
    from oba_stop_cache.domain.models.geohash_cache_difference import GeohashCacheDifference
    from oba_stop_cache.domain.models.stop_cache_entry import StopCacheEntry


class StopCacheDelegateProtocol(Protocol):
    """Protocol for synchronizing downstream state with stop cache changes."""

    async def cache_did_update(
        self,
        cache: "StopCacheProtocol",
        difference: "GeohashCacheDifference[Geohash, StopCacheEntry]",
    ) -> None:
        """Called after every upsert and discard pass.

        The difference may be empty, and calls carry no frequency guarantee.

        Args:
            cache: The cache that changed.
            difference: Ordered insertions and removals to apply.
        """
        ...
