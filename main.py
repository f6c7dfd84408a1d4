#!/usr/bin/env python3
"""
Licence Seat Monitor - Main Entry Point.

Usage:
    python main.py list [--all] [--json]
    python main.py users <product>
    python main.py parse <file> [--dialect simple|verbose] [--json]
    python main.py catalogue
    python main.py watch <product> [--interval 60]

Global options (before the command):
    --dialect simple|verbose|lmutil|lsmon   Output dialect of the query tool
    --server <address>                      Licence server to query
    --override <file>                       Parse a saved dump instead of querying
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from config.settings import LICENCE_DIALECT, LOG_FORMAT, LOG_LEVEL
from seats.catalog import default_catalog
from seats.errors import ConnectivityError, LicenceQueryError, QueryToolError
from seats.monitor import build_monitor
from seats.parsers import get_parser

logger = logging.getLogger("seats.cli")


# ============================================================
# Helpers
# ============================================================

def _get_monitor(args):
    return build_monitor(
        dialect=args.dialect,
        server=args.server,
        override_file=args.override,
    )


def _refresh(monitor) -> bool:
    """Refresh and print a user-facing message on failure."""
    try:
        monitor.refresh(force=True)
    except QueryToolError as exc:
        print(f"ERROR: {exc}. Please ensure the licence query tool is installed and on the PATH.")
        return False
    except ConnectivityError as exc:
        print(f"ERROR: Could not reach the licence server: {exc.message}")
        return False
    return True


def _print_licences(licences, names):
    if not names:
        print("No licences.")
        return

    print(f"\n{'Product':40s} {'In use':>8s} {'Seats':>8s}")
    print("-" * 58)
    for name in names:
        lic = licences.get(name)
        print(f"{name:40s} {len(lic.users):8d} {lic.seats_available:8d}")
    print(f"\nTotal: {len(names)} licence(s)")


# ============================================================
# Commands
# ============================================================

def cmd_list(args):
    """List licences and their seat usage."""
    monitor = _get_monitor(args)
    if not _refresh(monitor):
        return 1

    licences = monitor.licences
    names = monitor.visible_products(show_all=args.all, licences=licences)
    if args.json:
        print(json.dumps([licences.get(n).to_dict() for n in names], indent=2))
    else:
        _print_licences(licences, names)
    return 0


def cmd_users(args):
    """Show who holds seats of a product."""
    monitor = _get_monitor(args)
    if not _refresh(monitor):
        return 1

    licences = monitor.licences
    print(f"\n{args.product}: {licences.usage_summary(args.product)}")
    for line in licences.users_of(args.product):
        print(f"  {line}")
    return 0


def cmd_parse(args):
    """Parse a saved dump without querying a server."""
    path = Path(args.file)
    if not path.is_file():
        print(f"File not found: {args.file}")
        return 1

    parser = get_parser(args.dialect or LICENCE_DIALECT, catalog=default_catalog())
    try:
        licences = parser.parse(path.read_text(errors="replace"))
    except ConnectivityError as exc:
        print(f"ERROR: Dump reports an unreachable licence server: {exc.message}")
        return 1

    if args.json:
        print(json.dumps(licences.to_dict(), indent=2))
        return 0

    _print_licences(licences, licences.names())
    for lic in licences.list_all():
        if lic.users:
            print(f"\n{lic.name}:")
            for line in licences.users_of(lic.name):
                print(f"  {line}")
    return 0


def cmd_catalogue(args):
    """Show the product code catalogue."""
    catalog = default_catalog()
    print(f"\nProduct codes ({len(catalog)} entries)")
    print("=" * 50)
    for code, name in sorted(catalog.items()):
        print(f"  {code:15s} {name}")
    return 0


def cmd_watch(args):
    """Poll until a seat of the product becomes free."""
    monitor = _get_monitor(args)
    if not _refresh(monitor):
        return 1

    if args.product not in monitor.licences:
        print(f"Unknown licence: {args.product}")
        return 1
    if not monitor.watch(args.product):
        print("Licence available!")
        return 0

    print(f"Waiting for licence: {args.product} (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(args.interval)
            try:
                monitor.refresh(force=True)
            except LicenceQueryError:
                continue
            if args.product in monitor.check_watches():
                print("Licence available!")
                return 0
    except KeyboardInterrupt:
        print("\nStopped waiting.")
        return 1


# ============================================================
# Parser
# ============================================================

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Licence seat monitor for FlexNet lmutil and Sentinel lsmon servers"
    )
    parser.add_argument("--dialect", help="Output dialect: simple (lmutil) or verbose (lsmon)")
    parser.add_argument("--server", help="Licence server address")
    parser.add_argument("--override", help="Parse this saved output instead of querying")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    lst = subparsers.add_parser("list", help="List licences")
    lst.add_argument("--all", action="store_true", help="Show all licences, not only common ones")
    lst.add_argument("--json", action="store_true", help="JSON output")
    lst.set_defaults(func=cmd_list)

    usr = subparsers.add_parser("users", help="Show users of a licence")
    usr.add_argument("product", help="Product name")
    usr.set_defaults(func=cmd_users)

    prs = subparsers.add_parser("parse", help="Parse a saved output file")
    prs.add_argument("file", help="Captured lmutil/lsmon output")
    prs.add_argument("--dialect", default=argparse.SUPPRESS, help="Output dialect of the file")
    prs.add_argument("--json", action="store_true", help="JSON output")
    prs.set_defaults(func=cmd_parse)

    cat = subparsers.add_parser("catalogue", help="Show product code catalogue")
    cat.set_defaults(func=cmd_catalogue)

    wat = subparsers.add_parser("watch", help="Wait for a free seat")
    wat.add_argument("product", help="Product name")
    wat.add_argument("--interval", type=int, default=60, help="Seconds between checks")
    wat.set_defaults(func=cmd_watch)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(args.func(args))
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(2)


if __name__ == "__main__":
    main()
