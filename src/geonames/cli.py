"""
GeoNames command line.

Usage:
    geonames operations                                  # List operations
    geonames url search q=london maxRows=5               # Print the request URL
    geonames query ocean lat=40.78343 lng=-43.96625      # Run an operation
    geonames query search q=paris country=FR country=GP  # Repeated params
    geonames --config geonames.yaml query timezone lat=47.01 lng=10.2

Operations may be given by service name (findNearbyPlaceName) or method
name (find_nearby_place_name). Config is read from --config, then the
GEONAMES_* environment variables, then --host/--username.
"""

import argparse
import json
import logging
import os
import re
import sys

from geonames.client import GeoNamesClient
from geonames.config import load_config
from geonames.exceptions import GeoNamesError, InvalidOperation
from geonames.registry import OPERATIONS

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def method_name(operation_name: str) -> str:
    """findNearbyStreetsOSM -> find_nearby_streets_osm"""
    return _CAMEL_BOUNDARY.sub(r"_\1", operation_name).lower()


_BY_METHOD = {method_name(name): name for name in OPERATIONS}


def resolve_operation(name: str) -> str:
    if name in OPERATIONS:
        return name
    try:
        return _BY_METHOD[name]
    except KeyError:
        raise InvalidOperation(name) from None


def parse_params(pairs: list[str]) -> dict:
    """Turn ``key=value`` args into a dict; repeated keys become lists."""
    params: dict = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        if key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def cmd_operations(args, client):
    """List operations and their accepted parameters."""
    for name, op in sorted(client.operations.items()):
        note = "" if op.supported else "  (not supported)"
        params = ", ".join(op.allowed_params()) or "-"
        print(f"{name:<28} {method_name(name):<32} {params}{note}")


def cmd_url(args, client):
    name = resolve_operation(args.operation)
    print(client.url_for(name, parse_params(args.params)))


def cmd_query(args, client):
    """Run an operation and print the result as JSON."""
    name = resolve_operation(args.operation)
    result = getattr(client, method_name(name))(parse_params(args.params))
    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="geonames", description="GeoNames web service client")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--host", default=None, help="Service host (default ws.geonames.org)")
    parser.add_argument("--username", default=None, help="GeoNames account name")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        help="Logging level (default: $LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("operations", help="List supported operations")

    url_parser = subparsers.add_parser("url", help="Print the request URL without sending it")
    url_parser.add_argument("operation")
    url_parser.add_argument("params", nargs="*", help="key=value query parameters")

    query_parser = subparsers.add_parser("query", help="Run an operation")
    query_parser.add_argument("operation")
    query_parser.add_argument("params", nargs="*", help="key=value query parameters")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.log_level not in LOG_LEVELS:
        print(f"error: unknown log level {args.log_level!r}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "operations": cmd_operations,
        "url": cmd_url,
        "query": cmd_query,
    }

    try:
        config = load_config(
            args.config, host=args.host, username=args.username, timeout=args.timeout
        )
        commands[args.command](args, GeoNamesClient(config))
    except (GeoNamesError, argparse.ArgumentTypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
