"""Domain layer - core models, ports and contracts."""

from oba_stop_cache.domain.models import (
    CoordinateRegion,
    Geohash,
    GeohashCacheDifference,
    Stop,
    StopCacheEntry,
    StopsResponse,
)
from oba_stop_cache.domain.ports import StopsRepository

__all__ = [
    "CoordinateRegion",
    "Geohash",
    "GeohashCacheDifference",
    "Stop",
    "StopCacheEntry",
    "StopsRepository",
    "StopsResponse",
]
