"""Stops repository port."""

from typing import Protocol

from oba_stop_cache.domain.models.coordinate_region import CoordinateRegion
from oba_stop_cache.domain.models.stops_response import StopsResponse


class StopsRepository(Protocol):
    """Port for retrieving the stops inside a geographic region."""

    async def get_stops_in_region(self, region: CoordinateRegion) -> StopsResponse:
        """Get the stops inside a region.

        Transport and decoding failures are raised, never returned as an
        empty response.
        """
        ...
