"""Nuvl World CLI: load, day and serve entry points.

Usage:
    nuvlworld load facts.scm [more.scm ...] --descriptions labels.tsv
    nuvlworld day today --tz Europe/London   # Events overlapping a day
    nuvlworld serve                          # Start the HTTP server
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import NuvlWorldError
from .server.config import DataConfig, NuvlWorldConfig


def _load_config(path: Optional[str]) -> NuvlWorldConfig:
    if path:
        return NuvlWorldConfig.from_file(path)
    return NuvlWorldConfig.from_env()


def cmd_load(args: argparse.Namespace) -> int:
    """Load fact files and report what was indexed."""
    from .services.world import load_world

    config = NuvlWorldConfig(data=DataConfig(
        fact_files=[str(Path(p).resolve()) for p in args.facts],
        descriptions_file=args.descriptions,
    ))
    try:
        world = load_world(config)
    except NuvlWorldError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    for summary in world.summaries:
        print(
            f"{summary.source}: {summary.lines} lines, "
            f"{summary.facts_added} facts, "
            f"{summary.descriptions_stored} descriptions "
            f"({summary.descriptions_dropped} dropped)"
        )
    print(
        f"✅ {len(world.store)} facts, "
        f"{world.store.description_count} descriptions, "
        f"{len(world.store.predicates())} predicates"
    )
    return 0


def cmd_day(args: argparse.Namespace) -> int:
    """Print the events overlapping one day."""
    from zoneinfo import ZoneInfoNotFoundError

    from .services.intervals import resolve_zone, to_local_datetime
    from .services.temporal import resolve_date
    from .services.world import load_world

    config = _load_config(args.config)
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ {error}", file=sys.stderr)
        return 1

    zone_name = args.tz or config.display.time_zone
    try:
        zone = resolve_zone(zone_name)
        day = resolve_date(args.date, zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    try:
        world = load_world(config)
    except NuvlWorldError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    intervals = sorted(
        world.intervals.overlaps_date(day, zone),
        key=lambda i: (i.start_utc_millis, i.event),
    )
    print(f"{day.isoformat()} ({zone_name}): {len(intervals)} events")
    for interval in intervals:
        start = to_local_datetime(interval.start_utc_millis, zone)
        end = to_local_datetime(interval.end_utc_millis, zone)
        print(
            f"  {start:%Y-%m-%d %H:%M} - {end:%Y-%m-%d %H:%M}  "
            f"{world.store.title(interval.event)}"
        )
    return 0


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the HTTP server."""
    from .server.app import run_server

    config = _load_config(args.config)

    run_server(
        config=config,
        host=args.host,
        port=args.port,
        log_level=args.log_level or "info",
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="nuvlworld",
        description="Nuvl World: calendar over a triple fact store",
    )
    parser.add_argument("--log-level", type=str, default=None,
                        choices=["debug", "info", "warning", "error"])
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # load
    load_parser = subparsers.add_parser(
        "load", help="Load fact files and print a summary"
    )
    load_parser.add_argument("facts", nargs="+", help="Fact files, loaded in order")
    load_parser.add_argument("--descriptions", type=str, default=None,
                             help="Tab-separated id/description file (loaded last)")

    # day
    day_parser = subparsers.add_parser(
        "day", help="List events overlapping a day"
    )
    day_parser.add_argument("date", help="ISO date or expression such as 'today'")
    day_parser.add_argument("--tz", type=str, default=None,
                            help="IANA time zone (default: display.time_zone)")
    day_parser.add_argument("--config", "-c", type=str, default=None)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", "-p", type=int, default=None)
    serve_parser.add_argument("--config", "-c", type=str, default=None)

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, (args.log_level or "warning").upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "load":
        sys.exit(cmd_load(args))
    elif args.command == "day":
        sys.exit(cmd_day(args))
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
