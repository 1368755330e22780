"""Parsing of OBA REST API stop payloads into domain models."""

import logging
from typing import Any

from oba_stop_cache.adapters.oba_api.constants import WHEELCHAIR_BOARDING_MAP
from oba_stop_cache.domain.models.errors import ObaDecodeError
from oba_stop_cache.domain.models.stop import Stop
from oba_stop_cache.domain.models.stops_response import StopsResponse

logger = logging.getLogger(__name__)


def _parse_wheelchair_boarding(value: Any) -> str:
    if not isinstance(value, str):
        return "unknown"
    return WHEELCHAIR_BOARDING_MAP.get(value.upper(), "unknown")


def parse_stop(item: dict[str, Any]) -> Stop:
    """Parse one element of a stops list.

    Raises:
        ObaDecodeError: If a field is missing or malformed.
    """
    try:
        stop_id = str(item["id"])
        name = str(item["name"])
        latitude = float(item["lat"])
        longitude = float(item["lon"])
        location_type = int(item.get("locationType") or 0)
        route_ids = item.get("routeIds") or []
        if not isinstance(route_ids, list):
            raise TypeError(f"routeIds must be a list, got {type(route_ids).__name__}")
    except (KeyError, TypeError, ValueError) as e:
        raise ObaDecodeError(f"Malformed stop {item.get('id', '?')!r}: {e!r}") from e

    direction = item.get("direction") or None

    return Stop(
        id=stop_id,
        name=name,
        latitude=latitude,
        longitude=longitude,
        code=str(item.get("code") or ""),
        direction=direction.upper() if isinstance(direction, str) else None,
        location_type=location_type,
        route_ids=tuple(str(route_id) for route_id in route_ids),
        wheelchair_boarding=_parse_wheelchair_boarding(item.get("wheelchairBoarding")),
    )


def parse_stops_response(payload: dict[str, Any]) -> StopsResponse:
    """Parse the envelope of a stops-for-location response.

    The stops live in ``data.list``; some servers send ``data.entry`` instead.

    Raises:
        ObaDecodeError: If the envelope or any stop is malformed.
    """
    data = payload.get("data")
    if not isinstance(data, dict):
        raise ObaDecodeError("Response has no 'data' object")

    items = data.get("list")
    if items is None:
        items = data.get("entry")
    if not isinstance(items, list):
        raise ObaDecodeError("Response 'data' has no 'list' array")

    stops: list[Stop] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ObaDecodeError(
                f"Stops list element {index} is a {type(item).__name__}, not an object"
            )
        stops.append(parse_stop(item))

    return StopsResponse(
        stops=stops,
        limit_exceeded=data.get("limitExceeded"),
        out_of_range=data.get("outOfRange"),
    )
