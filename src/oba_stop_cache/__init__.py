"""Geohash-partitioned stop cache for OneBusAway transit maps."""

__version__ = "0.1.0"
