"""CLI for querying stops through the geohash stop cache."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Any

import aiohttp

from oba_stop_cache.adapters.api_service_holder import ApiServiceHolder
from oba_stop_cache.adapters.config import AppConfig
from oba_stop_cache.adapters.map import StopAnnotationMirror
from oba_stop_cache.adapters.oba_api import ObaStopsRepository
from oba_stop_cache.application.services import StopCache
from oba_stop_cache.domain.models import CoordinateRegion, Geohash, Stop, StopLimitExceededError

logger = logging.getLogger(__name__)

DEFAULT_SPAN_DEGREES = 0.01


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _stop_to_dict(stop: Stop) -> dict[str, Any]:
    data = asdict(stop)
    data["route_ids"] = list(stop.route_ids)
    return data


def _in_region(stop: Stop, region: CoordinateRegion) -> bool:
    return (
        region.south <= stop.latitude <= region.north
        and region.west <= stop.longitude <= region.east
    )


async def load_stops_in_region(
    config: AppConfig, region: CoordinateRegion, precision: int
) -> tuple[list[Stop], list[str]]:
    """Load the stops in a region through a stop cache.

    Returns:
        The stops inside the region sorted by name, and one message per cell
        that failed to load.
    """
    geohashes = sorted(Geohash.covering(region, precision), key=str)
    logger.info(f"Region is covered by {len(geohashes)} geohash cell(s) at precision {precision}")

    failures: list[str] = []
    async with aiohttp.ClientSession() as session:
        provider = ApiServiceHolder(ObaStopsRepository.from_config(session, config))
        mirror = StopAnnotationMirror()
        async with StopCache(
            provider,
            delegate=mirror,
            geohash_precision=precision,
            expiration=config.cache_expiration,
        ) as cache:
            await cache.set_active_geohashes(geohashes)
            results = await asyncio.gather(
                *(cache.load_stops(geohash) for geohash in geohashes), return_exceptions=True
            )
            for geohash, result in zip(geohashes, results, strict=True):
                if isinstance(result, StopLimitExceededError):
                    failures.append(f"{geohash}: {result} (try a higher --precision)")
                elif isinstance(result, Exception):
                    failures.append(f"{geohash}: {result}")

            await cache.wait_for_notifications()
        provider.clear()

    stops = [stop for stop in mirror.annotations.values() if _in_region(stop, region)]
    return sorted(stops, key=lambda s: (s.name, s.id)), failures


def _print_stops(stops: list[Stop]) -> None:
    print(f"\nFound {len(stops)} stop(s):\n")
    for stop in stops:
        direction = f" [{stop.direction}]" if stop.direction else ""
        print(f"  {stop.name}{direction}")
        print(f"    ID: {stop.id}  Code: {stop.code or '-'}")
        print(f"    Location: {stop.latitude:.6f}, {stop.longitude:.6f}")
        if stop.route_ids:
            print(f"    Routes: {', '.join(stop.route_ids)}")
        print()


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="OneBusAway stop cache helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the stops around a coordinate
  oba-stops near 47.6097 -122.3331

  # Use a bigger viewport and output JSON
  oba-stops near 47.6097 -122.3331 --lat-span 0.02 --lon-span 0.03 --json

  # Show the geohash cells covering a viewport
  oba-stops cells 47.6097 -122.3331
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    for name, help_text in (
        ("near", "List stops in a viewport around a coordinate"),
        ("cells", "List the geohash cells covering a viewport"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("latitude", type=float, help="Latitude of the viewport center")
        sub.add_argument("longitude", type=float, help="Longitude of the viewport center")
        sub.add_argument("--lat-span", type=float, default=DEFAULT_SPAN_DEGREES, help="Degrees")
        sub.add_argument("--lon-span", type=float, default=DEFAULT_SPAN_DEGREES, help="Degrees")
        sub.add_argument("--precision", type=int, default=None, help="Geohash precision")
        sub.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = AppConfig()
        _configure_logging(config.log_level)
        precision = args.precision or config.geohash_precision
        region = CoordinateRegion(
            latitude=args.latitude,
            longitude=args.longitude,
            latitude_span=args.lat_span,
            longitude_span=args.lon_span,
        )

        if args.command == "cells":
            cells = sorted(Geohash.covering(region, precision), key=str)
            if args.json:
                print(json.dumps([str(cell) for cell in cells], indent=2))
            else:
                for cell in cells:
                    print(
                        f"{cell}  ({cell.south:.5f}, {cell.west:.5f}) - "
                        f"({cell.north:.5f}, {cell.east:.5f})"
                    )

        elif args.command == "near":
            stops, failures = await load_stops_in_region(config, region, precision)
            for failure in failures:
                print(f"Warning: {failure}", file=sys.stderr)
            if args.json:
                print(json.dumps([_stop_to_dict(s) for s in stops], indent=2, ensure_ascii=False))
            else:
                if not stops:
                    print("No stops found.", file=sys.stderr)
                    sys.exit(1)
                _print_stops(stops)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
