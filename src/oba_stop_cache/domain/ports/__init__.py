"""Ports (interfaces) for the ports-and-adapters architecture."""

from oba_stop_cache.domain.ports.stops_repository import StopsRepository

__all__ = [
    "StopsRepository",
]
