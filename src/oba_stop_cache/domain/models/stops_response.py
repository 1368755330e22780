"""Stops response domain model."""

from dataclasses import dataclass

from oba_stop_cache.domain.models.stop import Stop


@dataclass(frozen=True)
class StopsResponse:
    """Result of a region query for stops.

    ``limit_exceeded`` is set by the server when it truncated the result set
    because the queried region held more stops than it returns per request.
    """

    stops: list[Stop]
    limit_exceeded: bool | None = None
    out_of_range: bool | None = None
