"""OneBusAway REST API adapters."""

from oba_stop_cache.adapters.oba_api.http_client import ObaHttpClient
from oba_stop_cache.adapters.oba_api.oba_stops_repository import ObaStopsRepository

__all__ = ["ObaHttpClient", "ObaStopsRepository"]
