"""Domain models for the OBA stop cache."""

from oba_stop_cache.domain.models.coordinate_region import CoordinateRegion
from oba_stop_cache.domain.models.error_details import ErrorDetails
from oba_stop_cache.domain.models.errors import (
    ObaApiError,
    ObaDecodeError,
    ServiceUnavailableError,
    StopCacheError,
    StopLimitExceededError,
)
from oba_stop_cache.domain.models.geohash import Geohash
from oba_stop_cache.domain.models.geohash_cache_difference import (
    Change,
    ChangeKind,
    GeohashCacheDifference,
)
from oba_stop_cache.domain.models.stop import Stop
from oba_stop_cache.domain.models.stop_cache_entry import StopCacheEntry
from oba_stop_cache.domain.models.stops_response import StopsResponse

__all__ = [
    "Change",
    "ChangeKind",
    "CoordinateRegion",
    "ErrorDetails",
    "Geohash",
    "GeohashCacheDifference",
    "ObaApiError",
    "ObaDecodeError",
    "ServiceUnavailableError",
    "Stop",
    "StopCacheEntry",
    "StopCacheError",
    "StopLimitExceededError",
    "StopsResponse",
]
