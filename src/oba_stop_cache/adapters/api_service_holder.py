"""Mutable holder for the stops API service."""

import logging
from typing import TYPE_CHECKING

from oba_stop_cache.domain.contracts.api_service_provider import ApiServiceProviderProtocol

if TYPE_CHECKING:
    from oba_stop_cache.domain.ports.stops_repository import StopsRepository

logger = logging.getLogger(__name__)


class ApiServiceHolder(ApiServiceProviderProtocol):
    """Provides the current API service to the stop cache.

    The owner replaces the service when the rider switches region and clears
    it on teardown. An empty holder is a valid state: loads fail with
    ServiceUnavailableError instead of crashing.
    """

    def __init__(self, api_service: "StopsRepository | None" = None) -> None:
        self._api_service = api_service

    @property
    def api_service(self) -> "StopsRepository | None":
        return self._api_service

    def set_api_service(self, api_service: "StopsRepository") -> None:
        logger.info(f"API service set to {type(api_service).__name__}")
        self._api_service = api_service

    def clear(self) -> None:
        if self._api_service is not None:
            logger.info("API service cleared")
        self._api_service = None
