"""Application layer - the geohash cache and the stop cache service."""
