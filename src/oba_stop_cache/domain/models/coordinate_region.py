"""Coordinate region domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoordinateRegion:
    """A rectangular geographic region described by its center and span.

    Mirrors the ``lat``/``lon``/``latSpan``/``lonSpan`` parameters of the
    OBA ``stops-for-location`` endpoint. Spans are measured in degrees.
    """

    latitude: float
    longitude: float
    latitude_span: float
    longitude_span: float

    @classmethod
    def from_bounds(
        cls, north: float, south: float, east: float, west: float
    ) -> "CoordinateRegion":
        """Create a region from its bounding box edges."""
        if north < south:
            raise ValueError(f"north ({north}) must not be below south ({south})")
        if east < west:
            raise ValueError(f"east ({east}) must not be west of west ({west})")
        return cls(
            latitude=(north + south) / 2,
            longitude=(east + west) / 2,
            latitude_span=north - south,
            longitude_span=east - west,
        )

    @property
    def north(self) -> float:
        return self.latitude + self.latitude_span / 2

    @property
    def south(self) -> float:
        return self.latitude - self.latitude_span / 2

    @property
    def east(self) -> float:
        return self.longitude + self.longitude_span / 2

    @property
    def west(self) -> float:
        return self.longitude - self.longitude_span / 2
