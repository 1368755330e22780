"""Errors raised by the stop cache and its adapters."""

from oba_stop_cache.domain.models.error_details import ErrorDetails
from oba_stop_cache.domain.models.geohash import Geohash


class StopCacheError(Exception):
    """Base class for stop cache errors."""


class ServiceUnavailableError(StopCacheError):
    """No API service was available when a fetch was needed."""

    def __init__(self, message: str = "No API service available") -> None:
        super().__init__(message)


class StopLimitExceededError(StopCacheError):
    """The server truncated the stops returned for a geohash.

    Callers can recover by querying the cell at a finer precision.
    """

    def __init__(self, geohash: Geohash, stop_count: int) -> None:
        self.geohash = geohash
        self.stop_count = stop_count
        super().__init__(
            f"Stop limit exceeded for geohash '{geohash}' "
            f"({stop_count} stops returned, precision {geohash.precision})"
        )


class ObaApiError(StopCacheError):
    """The OBA REST API answered with an error status."""

    def __init__(self, details: ErrorDetails, url: str, body: str = "") -> None:
        self.details = details
        self.url = url
        self.body = body
        super().__init__(
            f"OBA API error for {url}: {details.reason} (status: {details.status_code})"
        )

    @property
    def status_code(self) -> int | None:
        return self.details.status_code


class ObaDecodeError(StopCacheError):
    """The OBA REST API answered with a body that could not be decoded."""
