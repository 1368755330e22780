"""Geohash domain model.

A geohash is a rectangular cell expressing a location as a base32 string.
The longer the string, the smaller the cell:

    Precision   Cell width      Cell height
            1   <= 5,000km   x   5,000km
            2   <= 1,250km   x   625km
            3   <= 156km     x   156km
            4   <= 39.1km    x   19.5km
            5   <= 4.89km    x   4.89km
            6   <= 1.22km    x   0.61km
            7   <= 153m      x   153m
            8   <= 38.2m     x   19.1m
            9   <= 4.77m     x   4.77m
           10   <= 1.19m     x   0.596m
           11   <= 149mm     x   149mm
           12   <= 37.2mm    x   18.6mm

Encoding and decoding are delegated to ``pygeohash``.
"""

import math
from dataclasses import dataclass, field

import pygeohash

from oba_stop_cache.domain.models.coordinate_region import CoordinateRegion

BASE32_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"
MAX_PRECISION = 12

# Upper bound for Geohash.covering; a viewport needing more cells should use a coarser precision
MAX_COVERING_CELLS = 1024


def _wrap_longitude(longitude: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return ((longitude + 180.0) % 360.0) - 180.0


@dataclass(frozen=True)
class Geohash:
    """An immutable geohash cell.

    Equality and hashing only consider the encoded string, so instances can
    key a dict and live in a set.
    """

    geohash: str
    north: float = field(init=False, repr=False, compare=False)
    south: float = field(init=False, repr=False, compare=False)
    east: float = field(init=False, repr=False, compare=False)
    west: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.geohash:
            raise ValueError("Geohash must not be empty")
        if len(self.geohash) > MAX_PRECISION:
            raise ValueError(
                f"Geohash '{self.geohash}' exceeds maximum precision of {MAX_PRECISION}"
            )
        invalid = {c for c in self.geohash if c not in BASE32_ALPHABET}
        if invalid:
            raise ValueError(
                f"Geohash '{self.geohash}' contains invalid characters: {sorted(invalid)}"
            )

        latitude, longitude, latitude_error, longitude_error = pygeohash.decode_exactly(
            self.geohash
        )
        object.__setattr__(self, "north", latitude + latitude_error)
        object.__setattr__(self, "south", latitude - latitude_error)
        object.__setattr__(self, "east", longitude + longitude_error)
        object.__setattr__(self, "west", longitude - longitude_error)

    def __str__(self) -> str:
        return self.geohash

    @classmethod
    def from_string(cls, geohash: str) -> "Geohash":
        """Create a geohash from its encoded string.

        Raises:
            ValueError: If the string is empty, too long, or not valid base32.
        """
        return cls(geohash.strip().lower())

    @classmethod
    def from_coordinates(cls, latitude: float, longitude: float, precision: int) -> "Geohash":
        """Create the geohash of the given precision containing a coordinate."""
        if not 1 <= precision <= MAX_PRECISION:
            raise ValueError(f"precision must be between 1 and {MAX_PRECISION}, got {precision}")
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"latitude must be between -90 and 90, got {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f"longitude must be between -180 and 180, got {longitude}")
        return cls(pygeohash.encode(latitude, longitude, precision=precision))

    @property
    def precision(self) -> int:
        """The number of characters in the hash."""
        return len(self.geohash)

    @property
    def latitude(self) -> float:
        """Latitude of the center of the cell."""
        return (self.north + self.south) / 2

    @property
    def longitude(self) -> float:
        """Longitude of the center of the cell."""
        return (self.east + self.west) / 2

    @property
    def size(self) -> tuple[float, float]:
        """Latitude and longitude deltas of the cell in degrees."""
        return (self.north - self.south, self.east - self.west)

    @property
    def region(self) -> CoordinateRegion:
        """The bounding region of the cell, suitable for a region query."""
        return CoordinateRegion.from_bounds(
            north=self.north, south=self.south, east=self.east, west=self.west
        )

    def neighbors(self) -> list["Geohash"]:
        """Return the surrounding cells clockwise, starting with north.

        Cells that would lie beyond a pole are omitted. Longitudes wrap
        around the antimeridian.
        """
        latitude_size, longitude_size = self.size
        offsets = [
            (1, 0),  # N
            (1, 1),  # NE
            (0, 1),  # E
            (-1, 1),  # SE
            (-1, 0),  # S
            (-1, -1),  # SW
            (0, -1),  # W
            (1, -1),  # NW
        ]

        result: list[Geohash] = []
        for lat_offset, lon_offset in offsets:
            latitude = self.latitude + lat_offset * latitude_size
            if not -90.0 < latitude < 90.0:
                continue
            longitude = _wrap_longitude(self.longitude + lon_offset * longitude_size)
            result.append(Geohash.from_coordinates(latitude, longitude, self.precision))
        return result

    @classmethod
    def covering(cls, region: CoordinateRegion, precision: int) -> set["Geohash"]:
        """Return the set of cells of the given precision that cover a region.

        Raises:
            ValueError: If covering the region would take more than
                MAX_COVERING_CELLS cells.
        """
        south = max(region.south, -90.0)
        north = min(region.north, 90.0)
        west = max(region.west, -180.0)
        east = min(region.east, 180.0)

        origin = cls.from_coordinates(south, west, precision)
        latitude_size, longitude_size = origin.size

        rows = max(1, math.ceil((north - origin.south) / latitude_size))
        columns = max(1, math.ceil((east - origin.west) / longitude_size))
        if rows * columns > MAX_COVERING_CELLS:
            raise ValueError(
                f"Covering region needs {rows * columns} cells at precision {precision}, "
                f"more than the maximum of {MAX_COVERING_CELLS}"
            )

        cells: set[Geohash] = set()
        for row in range(rows):
            latitude = min(origin.latitude + row * latitude_size, 90.0)
            for column in range(columns):
                longitude = min(origin.longitude + column * longitude_size, 180.0)
                cells.add(cls.from_coordinates(latitude, longitude, precision))
        return cells
