"""Stop cache entry domain model."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from oba_stop_cache.domain.models.geohash import Geohash
from oba_stop_cache.domain.models.stop import Stop
from oba_stop_cache.domain.models.stops_response import StopsResponse


@dataclass(frozen=True)
class StopCacheEntry:
    """Cached stops for one geohash cell.

    Entries are never patched; a refresh replaces the whole entry.
    """

    id: str  # The geohash string
    stops: tuple[Stop, ...]
    created_at: datetime

    @classmethod
    def from_response(
        cls, geohash: Geohash, response: StopsResponse, created_at: datetime
    ) -> "StopCacheEntry":
        """Build an entry from a region query response."""
        return cls(id=geohash.geohash, stops=tuple(response.stops), created_at=created_at)

    def age(self, now: datetime) -> timedelta:
        """Return how long ago the entry was created."""
        return now - self.created_at

    def is_expired(self, now: datetime, expiration: timedelta) -> bool:
        """Whether the entry is at least ``expiration`` old."""
        return self.age(now) >= expiration
