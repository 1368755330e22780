"""Configuration adapters."""

from oba_stop_cache.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
