"""Application services."""

from oba_stop_cache.application.services.stop_cache import StopCache

__all__ = ["StopCache"]
