"""Command-line argument parsing and configuration setup."""

import argparse
import os
import sys
from pathlib import Path

from . import config
from .auth import hash_passcode
from .config import MapStyle


def parse_args(argv=None):
    """Parse command-line arguments and return parsed args."""
    parser = argparse.ArgumentParser(description="Keep a map of the places you want to visit")
    parser.add_argument(
        "--data-dir",
        default=str(config.data_dir),
        help=f"Directory holding the saved places file (default: {config.data_dir})",
    )
    parser.add_argument(
        "--style",
        choices=[style.value for style in MapStyle],
        default=config.map_style.value,
        help="Initial map imagery (default: standard)",
    )
    parser.add_argument(
        "--radius",
        type=int,
        default=config.search_radius,
        help=f"Nearby places search radius in meters, 10-10000 (default: {config.search_radius})",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=config.search_limit,
        help=f"Maximum nearby places to show, 1-500 (default: {config.search_limit})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=config.request_timeout,
        help=f"HTTP timeout in seconds for nearby places (default: {config.request_timeout})",
    )
    parser.add_argument(
        "--passcode",
        default=os.environ.get("BUCKETLIST_PASSCODE"),
        help=("Passcode required to unlock your places (default: $BUCKETLIST_PASSCODE). "
              "Prefer the environment variable: arguments are visible in the process list"),
    )
    return parser.parse_args(argv)


def setup_config(argv=None):
    """Parse arguments and apply them to config module."""
    args = parse_args(argv)

    # Limits enforced by the geosearch API
    if not 10 <= args.radius <= 10000:
        print("Error: --radius must be between 10 and 10000 meters.")
        sys.exit(1)
    if not 1 <= args.limit <= 500:
        print("Error: --limit must be between 1 and 500.")
        sys.exit(1)
    if args.timeout <= 0:
        print("Error: --timeout must be positive.")
        sys.exit(1)

    config.data_dir = Path(args.data_dir).expanduser()
    config.map_style = MapStyle(args.style)
    config.search_radius = args.radius
    config.search_limit = args.limit
    config.request_timeout = args.timeout
    if args.passcode:
        config.passcode_sha256 = hash_passcode(args.passcode)

    return args
