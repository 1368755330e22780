"""OBA stops repository adapter using the stops-for-location endpoint."""

import logging
from typing import TYPE_CHECKING

from oba_stop_cache.adapters.oba_api.constants import STOPS_FOR_LOCATION_PATH
from oba_stop_cache.adapters.oba_api.http_client import ObaHttpClient
from oba_stop_cache.adapters.oba_api.stop_parser import parse_stops_response
from oba_stop_cache.domain.models.stops_response import StopsResponse
from oba_stop_cache.domain.ports.stops_repository import StopsRepository

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from oba_stop_cache.adapters.config.app_config import AppConfig
    from oba_stop_cache.domain.models.coordinate_region import CoordinateRegion


class ObaStopsRepository(StopsRepository):
    """Adapter for querying stops by region from a OneBusAway server.

    Depending on how many stops lie inside the region, the server may only
    return a subset and set ``limitExceeded``. Smaller regions make a
    complete answer more likely.
    """

    def __init__(self, http_client: ObaHttpClient) -> None:
        self._http_client = http_client

    @classmethod
    def from_config(cls, session: "ClientSession", config: "AppConfig") -> "ObaStopsRepository":
        """Create a repository for the server configured in ``config``."""
        http_client = ObaHttpClient(
            session=session,
            base_url=config.oba_api_base_url,
            api_key=config.oba_api_key,
            timeout_seconds=config.oba_api_timeout,
            min_delay_seconds=config.oba_api_min_delay_seconds,
        )
        logger.info(f"Using OBA server {http_client.base_url}")
        return cls(http_client)

    async def get_stops_in_region(self, region: "CoordinateRegion") -> StopsResponse:
        """Get the stops inside a region.

        Args:
            region: The region to search.

        Returns:
            The parsed stops and the server's truncation flags.
        """
        params: dict[str, str | int | float] = {
            "lat": region.latitude,
            "lon": region.longitude,
            "latSpan": region.latitude_span,
            "lonSpan": region.longitude_span,
        }
        payload = await self._http_client.get_json(STOPS_FOR_LOCATION_PATH, params)
        response = parse_stops_response(payload)
        logger.debug(
            f"Fetched {len(response.stops)} stop(s) around ({region.latitude:.5f}, "
            f"{region.longitude:.5f}), limit exceeded: {bool(response.limit_exceeded)}"
        )
        return response
