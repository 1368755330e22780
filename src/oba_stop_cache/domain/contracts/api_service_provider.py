"""Protocol for providing the API service used by the stop cache."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from oba_stop_cache.domain.ports.stops_repository import StopsRepository


class ApiServiceProviderProtocol(Protocol):
    """Protocol for exposing an optional handle to the stops API service."""

    @property
    def api_service(self) -> "StopsRepository | None":
        """The current API service, or None if not configured or torn down."""
        ...
