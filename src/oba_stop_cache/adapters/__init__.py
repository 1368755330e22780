"""Adapters layer - external system integrations."""

from oba_stop_cache.adapters.api_service_holder import ApiServiceHolder
from oba_stop_cache.adapters.config import AppConfig
from oba_stop_cache.adapters.map import StopAnnotationMirror
from oba_stop_cache.adapters.oba_api import ObaHttpClient, ObaStopsRepository

__all__ = [
    "ApiServiceHolder",
    "AppConfig",
    "ObaHttpClient",
    "ObaStopsRepository",
    "StopAnnotationMirror",
]
