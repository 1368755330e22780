"""Stop domain model."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Stop:
    """Represents a transit stop returned by the OBA REST API."""

    id: str
    name: str
    latitude: float
    longitude: float
    code: str = ""
    direction: str | None = None  # Compass direction, e.g. "N" or "SW"
    location_type: int = 0  # 0 = stop, 1 = station, 2 = station entrance
    route_ids: tuple[str, ...] = field(default_factory=tuple)
    wheelchair_boarding: str = "unknown"
